"""Shared fixtures: a small ABSENCES sheet and a mocked Apps Script session."""

import datetime
from unittest.mock import MagicMock

import pytest

from app_colonnes import resoudre_roles
from gsheet_api import Dataset, GatewaySheet, PRET

ENTETES = [
    "Finca", "Date", "Code", "Nom et Prénom", "Equipe", "Motif",
    "Autorisation", "Observation", "_ts_date", "_ts_time",
]

LIGNES = [
    ["FINCA 20", "2025-01-10T00:00:00Z", "C1", "Jane Doe", "A", "Sick", "", "", "", ""],
    ["FINCA 20", "2025-01-11", "C2", "John Smith", "B", "Vacances", "", "", "", ""],
    ["finca 20", "12/01/2025", "C3", "Marie Curie", "A", "Sick", "", "", "", ""],
    ["FINCA 7", "2025-01-10T00:00:00Z", "C4", "Paul Durand", "A", "Sick", "", "", "", ""],
]

INSTANT = datetime.datetime(2025, 1, 15, 9, 30, 5)


def reponse(payload=None, ok=True, status=200):
    r = MagicMock()
    r.ok = ok
    r.status_code = status
    r.json.return_value = payload
    return r


@pytest.fixture
def dataset():
    return Dataset(list(ENTETES), [list(l) for l in LIGNES])


@pytest.fixture
def roles():
    return resoudre_roles(ENTETES)


@pytest.fixture
def session():
    s = MagicMock()
    s.get.return_value = reponse({"success": True})
    return s


@pytest.fixture
def gateway(session, dataset):
    g = GatewaySheet("https://script.google.com/macros/s/x/exec", session=session, horloge=lambda: INSTANT)
    g.dataset = dataset
    g.etat = PRET
    return g
