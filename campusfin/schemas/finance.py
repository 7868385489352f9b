"""Account, category and transaction schemas."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class AccountCreate(BaseModel):
    """Schema for creating an account."""
    name: str = Field(..., min_length=1, max_length=100)
    type: str = Field(default="checking", pattern=r"^(checking|savings|credit|cash)$")
    current_balance: float = 0.0
    notes: str = ""
    color_tag: Optional[str] = Field(None, max_length=20)
    icon: Optional[str] = Field(None, max_length=50)
    order: int = 0
    is_default: bool = False
    auto_pay_account_id: Optional[str] = None


class AccountUpdate(BaseModel):
    """Schema for updating an account; the balance follows its transactions."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = Field(None, pattern=r"^(checking|savings|credit|cash)$")
    notes: Optional[str] = None
    color_tag: Optional[str] = Field(None, max_length=20)
    icon: Optional[str] = Field(None, max_length=50)
    order: Optional[int] = None
    is_default: Optional[bool] = None
    auto_pay_account_id: Optional[str] = None


class AccountResponse(BaseModel):
    id: str
    user_id: str
    name: str
    type: str
    current_balance: float
    notes: str
    color_tag: Optional[str] = None
    icon: Optional[str] = None
    order: int
    is_default: bool
    auto_pay_account_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    """Schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., pattern=r"^(expense|income)$")
    parent_group: Optional[str] = Field(None, max_length=100)
    color_tag: Optional[str] = Field(None, max_length=20)
    icon: Optional[str] = Field(None, max_length=50)
    order: int = 0
    monthly_budget: Optional[float] = Field(None, ge=0)
    budget_period: str = "monthly"


class CategoryUpdate(BaseModel):
    """Schema for updating a category; rollover_balance is not directly editable."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    parent_group: Optional[str] = Field(None, max_length=100)
    color_tag: Optional[str] = Field(None, max_length=20)
    icon: Optional[str] = Field(None, max_length=50)
    order: Optional[int] = None
    monthly_budget: Optional[float] = Field(None, ge=0)
    budget_period: Optional[str] = None


class CategoryResponse(BaseModel):
    id: str
    user_id: str
    name: str
    type: str
    parent_group: Optional[str] = None
    color_tag: Optional[str] = None
    icon: Optional[str] = None
    order: int
    monthly_budget: Optional[float] = None
    budget_period: str
    rollover_balance: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TransactionCreate(BaseModel):
    """Schema for creating an expense or income."""
    type: str = Field(..., pattern=r"^(expense|income)$")
    amount: float = Field(..., gt=0)
    date: datetime
    account_id: str = Field(..., min_length=1)
    category_id: Optional[str] = None
    merchant: Optional[str] = Field(None, max_length=200)
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: str = ""


class TransactionUpdate(BaseModel):
    type: Optional[str] = Field(None, pattern=r"^(expense|income)$")
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[datetime] = None
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    merchant: Optional[str] = Field(None, max_length=200)
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    type: str
    amount: float
    date: datetime
    account_id: str
    category_id: Optional[str] = None
    merchant: Optional[str] = None
    payment_method: Optional[str] = None
    notes: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SavingsCategoryCreate(BaseModel):
    """Schema for creating a savings category; it is appended after the existing ones."""
    name: str = Field(..., max_length=100)
    description: str = ""
    target_amount: Optional[float] = Field(None, ge=0)


class SavingsCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    target_amount: Optional[float] = Field(None, ge=0)
    current_balance: Optional[float] = Field(None, ge=0)
    order: Optional[int] = Field(None, ge=0)


class SavingsCategoryResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: str
    target_amount: Optional[float] = None
    current_balance: float
    order: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
