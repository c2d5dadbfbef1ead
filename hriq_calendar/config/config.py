"""
Configuration du projet HRIQ Leave Calendar

Ce fichier centralise toutes les constantes (URLs du portail, sélecteurs,
délais, tables de correspondance) ainsi que le chargement des paramètres
d'exécution (identifiants, token du webhook, dossiers de sortie).

Les constantes se modifient ici sans toucher au code. Les paramètres
d'exécution sont lus UNE SEULE FOIS au démarrage par load_settings() puis
transmis explicitement au pipeline et au serveur.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values
from openpyxl.styles import Border, PatternFill, Side

# Racine du projet (un niveau au-dessus du package)
BASE_DIR = Path(__file__).resolve().parent.parent.parent


# ============================================================
# CONFIGURATION FICHIERS ET CHEMINS
# ============================================================

# Fichier .env contenant les identifiants (à ne JAMAIS committer)
ENV_FILE = BASE_DIR / ".env"

# Dossier lu par le site (website/data/leaves.json)
DEFAULT_OUTPUT_DIR = BASE_DIR / "website" / "data"

# Noms des fichiers de sortie
OUTPUT_JSON = "leaves.json"
OUTPUT_CSV = "leaves.csv"
OUTPUT_EXCEL = "rapport_conges.xlsx"
ARCHIVE_PATTERN = "leaves-{year:04d}-{month:02d}.json"

# Script lancé par le serveur webhook
MAIN_SCRIPT = BASE_DIR / "scripts" / "main.py"

# ============================================================
# CONFIGURATION PORTAIL
# ============================================================

PORTAL_BASE_URL = "https://essportal.goldbell.com.sg"
LOGIN_URL = f"{PORTAL_BASE_URL}/HR/Main/Login.aspx"
CALENDAR_URL = f"{PORTAL_BASE_URL}/LEAVE/Leave/eLeave/ViewLeaveCalendar2.aspx"

# Vue détaillée d'un jour tronqué ("+N more") ; {token} vient du lien
OVERFLOW_URL_TEMPLATE = f"{PORTAL_BASE_URL}/LEAVE/Leave/eLeave/ViewLeaveCalendarDetail.aspx?date={{token}}"

# Fragment d'URL indiquant qu'on est encore sur la page de connexion
LOGIN_INDICATOR = "login"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
]
VIEWPORT = {"width": 1920, "height": 1080}

# ============================================================
# SÉLECTEURS (essayés dans l'ordre, le premier trouvé gagne)
# ============================================================

USER_ID_SELECTORS = [
    'input[name*="UserID"]',
    'input[id*="UserID"]',
    'input[placeholder*="User"]',
    'input[type="text"]',
]
PASSWORD_SELECTORS = [
    'input[type="password"]',
]
SIGN_IN_SELECTORS = [
    'input[type="submit"]',
    'button[type="submit"]',
    'input[value*="SIGN"]',
    'input[value*="Sign"]',
    '.btn-login',
]

MONTH_SELECT = "#ddlMonth"
YEAR_SELECT = "#ddlYear"
DEPARTMENT_CHECKBOX_SELECTORS = [
    'input[type="checkbox"][id*="Department"]',
    'input[type="checkbox"][name*="Department"]',
    'input[type="checkbox"]:nth-of-type(3)',
]
SHOW_BUTTON_SELECTORS = [
    'input[value="Show"]',
    'input[value*="Show"]',
    '.btn-show',
]

CALENDAR_GRID_SELECTOR = "#tblCalendar"
DAY_CELL_SELECTOR = "#tblCalendar td[valign='top']"
DATE_LABEL_SELECTOR = "span.blacktextsmall, span.redtextsmall"
HOLIDAY_LABEL_SELECTOR = "span.redtextsmall"
LEAVE_ROW_SELECTOR = "table tr"
LEAVE_NAME_SELECTOR = "td[width='70%'] span.Approvedtextsmall"
LEAVE_TYPE_SELECTOR = "td[width='25%'] span.Approvedtextsmall"
LEAVE_TEXT_SELECTOR = "span.Approvedtextsmall"
MORE_LINK_SELECTOR = "a:has-text('more')"
# Vue détaillée : lignes de congé les plus internes (pas les lignes de mise en page)
OVERFLOW_ROW_SELECTOR = "tr:has(span.Approvedtextsmall):not(:has(tr))"

# ============================================================
# DÉLAIS ET TIMEOUTS
# ============================================================

PAGE_LOAD_TIMEOUT = 60000       # Chargement d'une page (ms)
LOGIN_FORM_TIMEOUT = 15000      # Apparition du formulaire de connexion (ms)
LOGIN_TIMEOUT = 30000           # Sortie de la page de connexion (ms)
CALENDAR_TIMEOUT = 10000        # Rendu de la grille du calendrier (ms)
FILTER_TIMEOUT = 5000           # Rechargement après "Show" (ms)
OVERFLOW_TIMEOUT = 5000         # Remplissage de la vue détaillée (ms)
POLL_INTERVAL = 0.2             # Intervalle de scrutation des attentes (s)

# Délai fixe après une action qui modifie l'écran sans signal observable
# (choix d'une liste déroulante, case à cocher). Course tolérée.
SETTLE_DELAY = 1.0

# ============================================================
# TYPES DE CONGÉS
# ============================================================

DEFAULT_LEAVE_COLOR = "#999999"

_WORK_FROM_HOME = {"name": "Work From Home", "color": "#9b59b6"}

LEAVE_TYPES: Dict[str, Dict[str, str]] = {
    "ANNU": {"name": "Annual Leave", "color": "#3498db"},
    "SL": {"name": "Sick Leave", "color": "#e74c3c"},
    "WFH": _WORK_FROM_HOME,
    "NSL": {"name": "National Service Leave", "color": "#1abc9c"},
    "CCL": {"name": "Childcare Leave", "color": "#f39c12"},
    "ML": {"name": "Medical Leave", "color": "#e91e63"},
    "PL": {"name": "Paternity Leave", "color": "#00bcd4"},
    "UL": {"name": "Unpaid Leave", "color": "#607d8b"},
    "CL": {"name": "Compassionate Leave", "color": "#795548"},
    "HL": {"name": "Hospitalization Leave", "color": "#ff5722"},
}

# Variantes d'un même code : elles partagent la même entrée
LEAVE_TYPE_ALIASES: Dict[str, str] = {
    "WFH 2": "WFH",
}

# ============================================================
# NOMS ET JOURS FÉRIÉS
# ============================================================

# Nom du portail -> nom court affiché
NAME_MAP: Dict[str, str] = {
    "JOHN YANG JIA HAN": "John",
    "LEE CHIN HAI (EDDY)": "Eddy",
    "MOHD ELIYAZAR BIN ISMAIL": "Eliyazar",
    "SARFARAZ ABDULLAH": "Abdullah",
    "LIM YI HWEE (JOEY)": "Joey",
    "TAN WEN XIAN (ALLEN)": "Allen",
    "CHUA SIN HAI": "Sin Hai",
}

# Jours fériés propres à l'entreprise (absents du portail)
COMPANY_HOLIDAYS: List[Dict] = [
    {"date": 16, "month": 2, "year": 2026, "name": "CNY Eve (Company Holiday)"},
    {"date": 19, "month": 2, "year": 2026, "name": "CNY (Company Holiday)"},
]

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December"
]

# ============================================================
# STYLES EXCEL
# ============================================================

# Abréviations des jours de la semaine (en-têtes des feuilles mensuelles)
WEEKDAY_LETTERS = ["M", "T", "W", "T", "F", "S", "S"]

HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
NAME_FILL = PatternFill(start_color="D6E4F0", end_color="D6E4F0", fill_type="solid")
TOTAL_FILL = PatternFill(start_color="B4C7E7", end_color="B4C7E7", fill_type="solid")
WE_FILL = PatternFill(start_color="D9D9D9", end_color="D9D9D9", fill_type="solid")        # Week-end
HOLIDAY_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")   # Jour férié

BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)

EXCEL_COLUMN_WIDTHS = {
    'collaborateur': 25,     # Colonne nom (synthèse et feuilles mensuelles)
    'metrics': 14,           # Colonnes de types de congés
    'day': 6.5,              # Colonnes de jours
}

# ============================================================
# SERVEUR WEBHOOK
# ============================================================

DEFAULT_PORT = 3847
SCRAPE_TIMEOUT = 180            # Durée max d'un scraping lancé par le webhook (s)
REMOTE_TIMEOUT = 240            # Attente côté client d'un scraping distant (s)


# ============================================================
# PARAMÈTRES D'EXÉCUTION
# ============================================================

@dataclass(frozen=True)
class Settings:
    """Paramètres d'exécution, construits une fois au démarrage."""

    user_id: Optional[str] = None
    password: Optional[str] = None
    webhook_token: Optional[str] = None
    webhook_url: Optional[str] = None
    headless: bool = True
    output_dir: Path = DEFAULT_OUTPUT_DIR
    debug_dir: Optional[Path] = None
    port: int = DEFAULT_PORT

    @property
    def has_credentials(self) -> bool:
        return bool(self.user_id and self.password)

    @property
    def aggregate_path(self) -> Path:
        return self.output_dir / OUTPUT_JSON


def _as_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_int(raw: Optional[str], default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def load_settings(env: Optional[Mapping[str, str]] = None, env_file: Optional[Path] = ENV_FILE) -> Settings:
    """
    Construit les paramètres d'exécution.

    Les valeurs du fichier .env sont lues en premier, l'environnement du
    processus (ou le dictionnaire `env` fourni) a toujours la priorité.

    Args:
        env: Variables à utiliser à la place de os.environ (tests)
        env_file: Fichier .env optionnel (None = ignoré)

    Returns:
        Settings immuable

    Exemple:
        >>> settings = load_settings({"HRIQ_USER_ID": "u", "HRIQ_PASSWORD": "p"}, env_file=None)
        >>> settings.has_credentials
        True
    """
    values: Dict[str, Optional[str]] = {}
    if env_file is not None and Path(env_file).exists():
        values.update(dotenv_values(env_file))
    values.update(os.environ if env is None else env)

    def get(key: str) -> Optional[str]:
        raw = values.get(key)
        if raw is None or not str(raw).strip():
            return None
        return str(raw).strip()

    output_dir = get("HRIQ_OUTPUT_DIR")
    debug_dir = get("HRIQ_DEBUG_DIR")
    webhook_url = get("HRIQ_WEBHOOK_URL")

    return Settings(
        user_id=get("HRIQ_USER_ID"),
        password=get("HRIQ_PASSWORD"),
        webhook_token=get("HRIQ_WEBHOOK_TOKEN"),
        webhook_url=webhook_url.rstrip("/") if webhook_url else None,
        headless=_as_bool(values.get("HRIQ_HEADLESS"), True),
        output_dir=Path(output_dir) if output_dir else DEFAULT_OUTPUT_DIR,
        debug_dir=Path(debug_dir) if debug_dir else None,
        port=_as_int(values.get("PORT"), DEFAULT_PORT),
    )
