"""
Pytest configuration and shared fixtures for the liquidador tests.
"""

import calendar
import os
from datetime import date
from unittest.mock import patch

import pytest

from liquidador import create_app
from liquidador.config import Settings, reset_global_settings
from liquidador.models.parameters import LiquidationParameters
from liquidador.models.records import (
    Pensioner,
    PensionerRecords,
    RawPaymentRecord,
    SharingRecord,
)
from liquidador.models.reference_tables import (
    ReferenceTable,
    YearlyEconomicIndex,
    get_default_reference_table,
)
from liquidador.storage.local import LocalDocumentStore

MONTH_ABBREVIATIONS = (
    "ene", "feb", "mar", "abr", "may", "jun",
    "jul", "ago", "sep", "oct", "nov", "dic",
)


def period_label(year: int, month: int, first_day: int = 1, last_day: int = None) -> str:
    """Build a payment period label such as "1 ene 2020 a 31 ene 2020"."""
    if last_day is None:
        last_day = calendar.monthrange(year, month)[1]
    abbreviation = MONTH_ABBREVIATIONS[month - 1]
    return f"{first_day} {abbreviation} {year} a {last_day} {abbreviation} {year}"


def payment_document(
    year: int,
    month: int,
    mesada: float,
    bonus: float = 0.0,
    first_day: int = 1,
    last_day: int = None,
) -> dict:
    """A raw payment document as stored in the ``pagos`` collection."""
    details = []
    if mesada:
        details.append({"codigo": "MESAD", "nombre": "Mesada Pensional", "ingresos": mesada})
    if bonus:
        details.append({"codigo": "MESAD14", "nombre": "Mesada Adicional", "ingresos": bonus})
    details.append({"codigo": "SALUD", "nombre": "Aporte salud", "egresos": mesada * 0.12})
    return {
        "año": year,
        "periodoPago": period_label(year, month, first_day, last_day),
        "detalles": details,
    }


def full_year_documents(year: int, mesada: float) -> list:
    """Twelve monthly payments plus the June and December bonus mesadas."""
    return [
        payment_document(year, month, mesada, bonus=mesada if month in (6, 12) else 0.0)
        for month in range(1, 13)
    ]


@pytest.fixture(autouse=True)
def test_environment():
    """Provide a valid SECRET_KEY and a fresh global settings instance."""
    reset_global_settings()
    with patch.dict(os.environ, {"SECRET_KEY": "test-secret-key-123"}):
        yield
    reset_global_settings()


@pytest.fixture
def reference_table():
    """The packaged SMLMV/IPC reference table."""
    return get_default_reference_table()


@pytest.fixture
def flat_table():
    """Small table with round numbers: SMLMV grows 10%, IPC 5% every year."""
    indices = []
    smlmv = 1_000_000.0
    for year in range(2010, 2021):
        indices.append(
            YearlyEconomicIndex(
                year=year, smlmv=smlmv, smlmv_growth_pct=10.0, ipc_growth_pct=5.0
            )
        )
        smlmv *= 1.10
    return ReferenceTable(indices=tuple(indices), source="test")


@pytest.fixture
def parameters():
    """Liquidation parameters with a fixed cutoff year."""
    return LiquidationParameters(cutoff_year=2020)


@pytest.fixture
def pensioner():
    return Pensioner(
        id="P-001",
        documento="12345678",
        empleado="JUAN PEREZ (C.C. 12345678)",
        dependencia1="Planta",
    )


@pytest.fixture
def payment_factory():
    """Build validated payment records."""

    def factory(*args, **kwargs) -> RawPaymentRecord:
        return RawPaymentRecord.model_validate(payment_document(*args, **kwargs))

    return factory


@pytest.fixture
def document_factory():
    """Build raw payment documents (dicts with the stored field names)."""
    return payment_document


@pytest.fixture
def full_year_factory():
    """Build the validated payments of a complete year (12 + 2 bonus)."""

    def factory(year: int, mesada: float):
        return [RawPaymentRecord.model_validate(d) for d in full_year_documents(year, mesada)]

    return factory


@pytest.fixture
def shared_pension_records(pensioner):
    """
    Pensioner paid 2,000,000 a month from 2018 whose pension starts being
    shared with ISS on 1 July 2019 (employer 600,000, ISS 1,500,000).
    """
    documents = full_year_documents(2018, 2_000_000)
    documents += [
        payment_document(2019, month, 2_060_000 if month < 7 else 600_000)
        for month in range(1, 13)
    ]
    documents += [payment_document(2020, month, 620_000) for month in range(1, 13)]

    sharing = SharingRecord(
        fecha_desde=date(2019, 7, 1),
        tipo_aum="ISS",
        valor_empresa=600_000,
        valor_iss=1_500_000,
        cedula_beneficiario="12345678",
    )
    return PensionerRecords(
        pensioner=pensioner,
        payments=[RawPaymentRecord.model_validate(d) for d in documents],
        sharing_records=[sharing],
    )


@pytest.fixture
def store(tmp_path):
    """Local document store seeded with one pensioner."""
    document_store = LocalDocumentStore(base_path=str(tmp_path / "documents"))
    document_store.put_document(
        "pensionados",
        "P-001",
        {"documento": "12345678", "empleado": "JUAN PEREZ (C.C. 12345678)"},
    )
    documents = full_year_documents(2018, 2_000_000)
    documents += full_year_documents(2019, 2_060_000)
    documents.append(payment_document(2019, 1, 2_060_000))  # duplicated upload
    document_store.put_document("pagos", "P-001", {"records": documents})
    document_store.put_document(
        "pagosHistorico",
        "12345678",
        {"records": [{"ANO_RET": 2017, "VALOR_ACT": "1.950.000,00"}]},
    )
    return document_store


@pytest.fixture
def app(store, tmp_path):
    """Flask application wired to the seeded local document store."""
    settings = Settings(
        SECRET_KEY="test-secret-key-123",
        APP_ENV="testing",
        STORAGE_TYPE="local",
        STORAGE_BASE_PATH=str(tmp_path / "documents"),
        LIQUIDATION_CUTOFF_YEAR=2020,
        _env_file=None,
    )
    return create_app(settings)


@pytest.fixture
def client(app):
    return app.test_client()
