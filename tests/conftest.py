"""Shared pytest fixtures for intentc tests."""

from pathlib import Path

import pytest

SHOP_SOURCE = """\
# Small shop used across the test suite
auth entity User:
    id: uuid @primary
    email: email @unique
    password_hash: string
    role: admin | customer @default(customer)
    created_at: datetime @auto

entity Order:
    id: uuid @primary
    user_id: ref<User>
    total: number @validate(min: 0)
    status: pending | paid | shipped
    items: list<OrderItem>

    policy OwnsOrder:
        subject: @auth
        require Order.user_id == subject.id

entity OrderItem:
    id: uuid @primary
    name: string
    quantity: number

policy IsAdmin:
    subject: @auth
    require subject.role == admin

@api POST /orders/{id}/pay
@auth
@policy(Order.OwnsOrder)
action pay_order:
    input:
        id: uuid
    process:
        derive order = select Order where id == input.id
        mutate Order where id == input.id:
            status = paid
    output: Order(id, status)

rule BigOrder:
    when Order.total > 1000 and not Order.status == shipped
    then log("Large order placed")
"""


@pytest.fixture
def shop_source() -> str:
    """Return a complete, valid intent source."""
    return SHOP_SOURCE


@pytest.fixture
def shop_file(tmp_path: Path) -> Path:
    """Write the shop source to a temporary .intent file."""
    path = tmp_path / "shop.intent"
    path.write_text(SHOP_SOURCE, encoding="utf-8")
    return path
