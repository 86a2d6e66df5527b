from datetime import datetime

from .common import CamelModel, Money


class Customer(CamelModel):
    id: str
    name: str
    email: str | None = None


class Account(CamelModel):
    id: str
    customer_id: str
    type: str
    nickname: str = ""
    currency: str = "USD"
    balance: Money
    updated_at: datetime


class CustomersResponse(CamelModel):
    customers: list[Customer]


class AccountsResponse(CamelModel):
    data: list[Account]
