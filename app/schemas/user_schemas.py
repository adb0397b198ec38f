from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional


class UserRegister(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email: EmailStr
    password: str
    confirm_password: str

    @model_validator(mode="after")
    def validate_passwords(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self

class UserResponse(BaseModel):
    message: str
    user_id: int
    email: EmailStr
    role: str
    can_login: bool

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

class RoleUpdate(BaseModel):
    role: str

    @model_validator(mode="after")
    def validate_role(self):
        if self.role not in ("client", "admin"):
            raise ValueError("Role must be 'client' or 'admin'")
        return self

class LoginAccessUpdate(BaseModel):
    can_login: bool

class PaymentMethodCreate(BaseModel):
    type: str = Field(default="card", pattern="^(card|paypal)$")
    card_brand: Optional[str] = None
    card_last_four: Optional[str] = None
    card_holder_name: Optional[str] = None

    @model_validator(mode="after")
    def validate_card(self):
        if self.type == "card":
            digits = "".join(c for c in (self.card_last_four or "") if c.isdigit())
            if len(digits) < 4:
                raise ValueError("Card payment methods need the last four digits")
            # only the tail of whatever was typed is kept
            self.card_last_four = digits[-4:]
        else:
            self.card_brand = None
            self.card_last_four = None
        return self
