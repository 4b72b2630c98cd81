"""Tests for telegram_api: completion notification relay and client."""

from unittest.mock import MagicMock

import pytest
import requests

from app_config import ConfigApp
from app_erreurs import BackendError, ConnectivityError
from conftest import reponse
from telegram_api import demarrer_relais, message_completion, notifier_completion, relayer_notification

CONFIG = ConfigApp(telegram_token="TOKEN", telegram_chat_id="-100", timeout=5)


@pytest.fixture
def telegram():
    s = MagicMock()
    s.post.return_value = reponse({"ok": True, "result": {}})
    return s


class TestRelayerNotification:

    def test_date_obligatoire(self, telegram):
        statut, payload = relayer_notification("", "fr", CONFIG, telegram)
        assert statut == 400
        assert payload == {"success": False, "error": "Date parameter is required"}
        telegram.post.assert_not_called()

    def test_succes_fr(self, telegram):
        statut, payload = relayer_notification("2025-01-15", "fr", CONFIG, telegram)
        assert statut == 200
        assert payload == {"success": True, "message": "Notification sent for 2025-01-15"}
        args, kwargs = telegram.post.call_args
        assert args[0] == "https://api.telegram.org/botTOKEN/sendMessage"
        assert kwargs["json"] == {
            "chat_id": "-100",
            "text": "✅ Suivi des absences complété pour: 2025-01-15",
            "parse_mode": "HTML",
        }

    def test_langue_inconnue_en_anglais(self, telegram):
        relayer_notification("2025-01-15", "de", CONFIG, telegram)
        assert telegram.post.call_args.kwargs["json"]["text"] == "✅ Absence tracking completed for: 2025-01-15"

    def test_erreur_api(self, telegram):
        telegram.post.return_value = reponse({"ok": False, "description": "chat not found"}, ok=False, status=400)
        statut, payload = relayer_notification("2025-01-15", "en", CONFIG, telegram)
        assert statut == 500
        assert payload["error"] == "Failed to send Telegram message"
        assert payload["details"]["description"] == "chat not found"

    def test_erreur_reseau(self, telegram):
        telegram.post.side_effect = requests.exceptions.ConnectionError("unreachable")
        statut, payload = relayer_notification("2025-01-15", "en", CONFIG, telegram)
        assert statut == 500
        assert payload["success"] is False
        assert "unreachable" in payload["error"]

    def test_non_configure(self, telegram):
        statut, _ = relayer_notification("2025-01-15", "en", ConfigApp(), telegram)
        assert statut == 500
        telegram.post.assert_not_called()

    def test_message(self):
        assert message_completion("d", "en") == "✅ Absence tracking completed for: d"


class TestNotifierCompletion:

    URL = "http://localhost:8505/api/telegram-notify"

    def test_succes(self):
        session = MagicMock()
        session.get.return_value = reponse({"success": True, "message": "Notification sent for 2025-01-15"})
        assert notifier_completion(self.URL, "2025-01-15", "fr", session=session) == "Notification sent for 2025-01-15"
        assert session.get.call_args.kwargs["params"] == {"date": "2025-01-15", "language": "fr"}

    def test_erreur_relais(self):
        session = MagicMock()
        session.get.return_value = reponse({"success": False, "error": "Failed to send Telegram message"}, ok=False, status=500)
        with pytest.raises(BackendError, match="Failed to send Telegram message"):
            notifier_completion(self.URL, "2025-01-15", "fr", session=session)

    def test_relais_injoignable(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(ConnectivityError):
            notifier_completion(self.URL, "2025-01-15", "fr", session=session)


class TestRelaisHttp:

    @pytest.fixture
    def http(self):
        s = requests.Session()
        s.trust_env = False
        return s

    @pytest.fixture
    def serveur(self):
        srv = demarrer_relais(CONFIG, port=0)
        yield f"http://127.0.0.1:{srv.server_address[1]}"
        srv.shutdown()
        srv.server_close()

    def test_route_inconnue(self, serveur, http):
        r = http.get(f"{serveur}/autre", timeout=5)
        assert r.status_code == 404

    def test_date_manquante(self, serveur, http):
        r = http.get(f"{serveur}/api/telegram-notify", params={"language": "fr"}, timeout=5)
        assert r.status_code == 400
        assert r.json() == {"success": False, "error": "Date parameter is required"}

    def test_relais_complet(self, serveur, http, monkeypatch):
        import telegram_api
        monkeypatch.setattr(
            telegram_api, "relayer_notification",
            lambda date, langue, config, session=None: (200, {"success": True, "message": f"Notification sent for {date}"}),
        )
        message = notifier_completion(f"{serveur}/api/telegram-notify", "2025-01-15", "en", session=http, timeout=5)
        assert message == "Notification sent for 2025-01-15"
