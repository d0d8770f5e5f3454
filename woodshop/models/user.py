# woodshop/models/user.py
import uuid

from sqlmodel import Field, SQLModel


class UserRole(SQLModel, table=True):
    """
    Application role granted to a Supabase auth user.

    Identity lives in Supabase Auth (auth.users); this table only says
    what a user may do: "admin" | "worker" | "buyer".
    A user without any row is a plain customer.
    """

    __tablename__ = "user_roles"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    user_id: uuid.UUID = Field(
        index=True,
        description="Matches Supabase auth.users.id",
    )

    role: str = Field(index=True)
