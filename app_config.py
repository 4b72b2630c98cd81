#################
# Configuration #
#################

# La configuration est lue dans la section [absences] de .streamlit/secrets.toml,
# puis surchargée par les variables d'environnement ABSENCES_* :
#
# [absences]
# url_script = "https://script.google.com/macros/s/.../exec"
# telegram_token = "..."
# telegram_chat_id = "..."
# [absences.colonnes]
# motif = "Motif"        # nom d'entête ou index de colonne
# audit = [8, 9]

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from app_colonnes import ConfigColonnes, ROLES
from app_const import NOM_FEUILLE, VALEUR_PORTE, TIMEOUT_HTTP, PORT_RELAIS, ROUTE_RELAIS
from app_erreurs import ValidationError
from app_utils import safe_int
import tracer

SECTION_SECRETS = "absences"
PREFIXE_ENV = "ABSENCES_"
DOMAINE_SCRIPT = "script.google.com"


@dataclass(frozen=True)
class ConfigApp:
    url_script: str = ""
    nom_feuille: str = NOM_FEUILLE
    url_relais: str = f"http://localhost:{PORT_RELAIS}{ROUTE_RELAIS}"
    valeur_porte: str = VALEUR_PORTE
    telegram_token: str = ""
    telegram_chat_id: str = ""
    timeout: float = TIMEOUT_HTTP
    port_relais: int = PORT_RELAIS
    colonnes: ConfigColonnes = field(default_factory=ConfigColonnes)

    @property
    def telegram_configure(self) -> bool:
        return bool(self.telegram_token) and bool(self.telegram_chat_id)


# Vérifie l'URL de déploiement du script Apps Script saisie ou configurée
def valider_url_script(url) -> str:
    url = (url or "").strip() if isinstance(url, str) else ""
    if not url:
        raise ValidationError("url_script", "Google Apps Script URL is required")
    if DOMAINE_SCRIPT not in url:
        raise ValidationError("url_script", "Please enter a valid Google Apps Script deployment URL")
    return url

def _colonnes(brut) -> ConfigColonnes:
    if not brut:
        return ConfigColonnes()
    roles = {}
    for role in ROLES:
        if role in brut and brut[role] not in (None, ""):
            v = brut[role]
            roles[role] = v if isinstance(v, int) else str(v)
    audit = brut.get("audit")
    if audit is not None:
        audit = tuple(safe_int(c) for c in audit)
        if len(audit) != 2 or None in audit:
            raise ValidationError("colonnes.audit", "Audit columns must be two column indices")
    return ConfigColonnes(roles=roles, audit=audit)

def charger_config(secrets: Optional[Mapping] = None, env: Optional[Mapping] = None) -> ConfigApp:
    env = os.environ if env is None else env
    section = {}
    if secrets is not None and SECTION_SECRETS in secrets:
        section = dict(secrets[SECTION_SECRETS])

    def lire(cle, defaut=None):
        v = env.get(PREFIXE_ENV + cle.upper())
        if v is None or v == "":
            v = section.get(cle)
        return defaut if v is None or v == "" else v

    port = safe_int(lire("port_relais"), PORT_RELAIS)
    try:
        timeout = float(lire("timeout", TIMEOUT_HTTP))
    except (TypeError, ValueError):
        raise ValidationError("timeout", "Timeout must be a number of seconds")

    config = ConfigApp(
        url_script=str(lire("url_script", "")).strip(),
        nom_feuille=str(lire("nom_feuille", NOM_FEUILLE)),
        url_relais=str(lire("url_relais", f"http://localhost:{port}{ROUTE_RELAIS}")),
        valeur_porte=str(lire("valeur_porte", VALEUR_PORTE)),
        telegram_token=str(lire("telegram_token", "")),
        telegram_chat_id=str(lire("telegram_chat_id", "")),
        timeout=timeout,
        port_relais=port,
        colonnes=_colonnes(section.get("colonnes")),
    )
    tracer.log(f"script {config.url_script or '-'} relais {config.url_relais}", types=["main"])
    return config
