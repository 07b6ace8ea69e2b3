import pytest
from sqlalchemy.orm import Session
from datetime import date, timedelta

from app.crud.contract import (
    create_contract,
    get_contract,
    get_all_contracts,
    update_contract,
    delete_contract,
)
from app.core.exceptions import ContractNotFound, ContractValidationError


def contract_data(**overrides) -> dict:
    data = {
        "title": "Managed support",
        "counterparty": "Acme Ltd",
        "start_date": date(2026, 1, 1),
        "end_date": date(2026, 12, 31),
        "status": "Active",
        "value": 120000.0,
    }
    data.update(overrides)
    return data

def test_create_contract_success(db: Session):
    contract = create_contract(db, contract_data())
    assert contract.id is not None
    assert contract.duration_days == 364

def test_create_contract_missing_value(db: Session):
    with pytest.raises(ContractValidationError, match="are required"):
        create_contract(db, contract_data(value=None))

def test_create_contract_negative_value(db: Session):
    with pytest.raises(ContractValidationError, match="Value cannot be negative."):
        create_contract(db, contract_data(value=-1))

def test_create_contract_end_before_start(db: Session):
    with pytest.raises(ContractValidationError, match="End date must be after start date."):
        create_contract(db, contract_data(end_date=date(2025, 12, 31)))

def test_create_contract_long_counterparty(db: Session):
    with pytest.raises(ContractValidationError, match="200 characters"):
        create_contract(db, contract_data(counterparty="x" * 201))

def test_get_all_contracts_filters(db: Session):
    active = create_contract(db, contract_data(counterparty="Globex"))
    pending = create_contract(db, contract_data(counterparty="Initech", status="Pending"))

    ids = [c.id for c in get_all_contracts(db, {"active_only": True})]
    assert active.id in ids and pending.id not in ids

    ids = [c.id for c in get_all_contracts(db, {"counterparty": "initech"})]
    assert ids == [pending.id]

def test_update_contract(db: Session):
    contract = create_contract(db, contract_data())
    updated = update_contract(db, contract.id, {"status": "Terminated"})
    assert updated.status == "Terminated"

    with pytest.raises(ContractValidationError):
        update_contract(db, contract.id, {"end_date": contract.start_date - timedelta(days=1)})

def test_delete_contract(db: Session):
    contract = create_contract(db, contract_data())
    delete_contract(db, contract.id)
    with pytest.raises(ContractNotFound):
        get_contract(db, contract.id)
