from pydantic import BaseModel


class AuthUser(BaseModel):
    """
    Caller identity as supplied by the mini-app (the Telegram user id).
    Authentication itself happens upstream; here we only trust the id.
    """

    user_id: int
    is_admin: bool = False
