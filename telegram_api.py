################
# API Telegram #
################

# Relais de notification "suivi terminé" vers un chat Telegram.
# Le relais tourne dans un mini serveur HTTP démarré par l'application (thread daemon) :
#   GET /api/telegram-notify?date=AAAA-MM-JJ&language=fr|en -> { success, message | error }
# Le jeton du bot reste côté relais ; l'interface n'appelle que la route du relais.

import functools
import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests

from app_config import ConfigApp
from app_const import ROUTE_RELAIS, TIMEOUT_HTTP, URL_API_TELEGRAM
from app_erreurs import BackendError, ConnectivityError
import tracer

MESSAGES = {
    "fr": "✅ Suivi des absences complété pour: {date}",
    "en": "✅ Absence tracking completed for: {date}",
}


def message_completion(date: str, langue: str) -> str:
    return MESSAGES["fr" if langue == "fr" else "en"].format(date=date)

# Envoie le message au bot Telegram et renvoie (statut HTTP, corps JSON) pour le relais
def relayer_notification(date, langue, config: ConfigApp, session: Optional[requests.Session] = None) -> Tuple[int, Dict[str, Any]]:
    if not date or not isinstance(date, str):
        return 400, {"success": False, "error": "Date parameter is required"}
    if not config.telegram_configure:
        tracer.erreur("Jeton ou chat Telegram non configuré")
        return 500, {"success": False, "error": "Telegram bot token or chat id is not configured"}

    session = session or requests.Session()
    url = f"{URL_API_TELEGRAM}/bot{config.telegram_token}/sendMessage"
    corps = {
        "chat_id": config.telegram_chat_id,
        "text": message_completion(date, langue),
        "parse_mode": "HTML",
    }
    try:
        reponse = session.post(url, json=corps, timeout=config.timeout)
    except requests.exceptions.RequestException as e:
        tracer.erreur(f"Erreur d'envoi Telegram : {e}")
        return 500, {"success": False, "error": str(e) or "Unknown error"}
    try:
        resultat = reponse.json()
    except ValueError:
        resultat = None

    if not reponse.ok or not isinstance(resultat, dict) or not resultat.get("ok"):
        tracer.erreur(f"Erreur API Telegram : {resultat}")
        return 500, {"success": False, "error": "Failed to send Telegram message", "details": resultat}

    tracer.log(f"Notification envoyée pour {date} ({langue})", types=["relais"])
    return 200, {"success": True, "message": f"Notification sent for {date}"}


def _json_response(handler: BaseHTTPRequestHandler, payload: Dict[str, Any], status: int = 200) -> None:
    data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    handler.send_response(status)
    handler.send_header("Content-Type", "application/json; charset=utf-8")
    handler.send_header("Content-Length", str(len(data)))
    handler.send_header("Access-Control-Allow-Origin", "*")
    handler.end_headers()
    handler.wfile.write(data)


class RelaisHandler(BaseHTTPRequestHandler):
    def __init__(self, *args, config: ConfigApp = None, session: Optional[requests.Session] = None, **kwargs):
        self.config = config or ConfigApp()
        self.session = session
        super().__init__(*args, **kwargs)

    def do_GET(self) -> None:
        url = urlparse(self.path)
        if url.path != ROUTE_RELAIS:
            _json_response(self, {"success": False, "error": "Not found"}, 404)
            return
        params = parse_qs(url.query)
        date = params.get("date", [None])[0]
        langue = params.get("language", ["en"])[0]
        statut, payload = relayer_notification(date, langue, self.config, self.session)
        _json_response(self, payload, statut)

    def log_message(self, fmt: str, *args: Any) -> None:
        return


def _port_libre(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(("localhost", port)) != 0

# Démarre le relais sur un thread daemon. Renvoie None si le port est déjà pris
# (relais déjà lancé par une session précédente).
def demarrer_relais(config: ConfigApp, port: Optional[int] = None) -> Optional[ThreadingHTTPServer]:
    port = config.port_relais if port is None else port
    if port and not _port_libre(port):
        tracer.log(f"Relais déjà actif sur le port {port}", types=["relais"])
        return None
    handler = functools.partial(RelaisHandler, config=config)
    srv = ThreadingHTTPServer(("localhost", port), handler)
    threading.Thread(target=srv.serve_forever, daemon=True).start()
    tracer.log(f"Relais démarré sur le port {srv.server_address[1]}", types=["relais"])
    return srv

# Appel du relais depuis l'interface. Renvoie le message de confirmation du relais.
def notifier_completion(url_relais: str, date: str, langue: str, session: Optional[requests.Session] = None,
                        timeout: float = TIMEOUT_HTTP) -> str:
    session = session or requests.Session()
    try:
        reponse = session.get(url_relais, params={"date": date, "language": langue}, timeout=timeout)
    except requests.exceptions.RequestException as e:
        tracer.erreur(f"Relais injoignable : {e}")
        raise ConnectivityError(str(e)) from e
    try:
        resultat = reponse.json()
    except ValueError as e:
        raise BackendError(f"HTTP error! status: {reponse.status_code}") from e
    if not reponse.ok or not isinstance(resultat, dict) or not resultat.get("success"):
        erreur = resultat.get("error") if isinstance(resultat, dict) else None
        raise BackendError(erreur or "Failed to send notification")
    tracer.log(resultat.get("message", ""), types=["relais"])
    return resultat.get("message") or f"Notification sent for {date}"
