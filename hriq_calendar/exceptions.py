"""Exceptions du projet.

Les erreurs fatales arrêtent tout le scraping ; les situations dégradées
(contrôle absent, vue détaillée en échec) sont seulement journalisées.
"""


class HriqError(Exception):
    """Erreur de base du projet."""


class MissingCredentialsError(HriqError):
    """HRIQ_USER_ID ou HRIQ_PASSWORD absent."""


class LoginFormError(HriqError):
    """Champ identifiant / mot de passe ou bouton de connexion introuvable."""


class AuthenticationError(HriqError):
    """Toujours sur la page de connexion après l'envoi du formulaire."""


class CalendarNotFoundError(HriqError):
    """La grille du calendrier ne s'est jamais affichée."""


class AlreadyRunningError(HriqError):
    """Un scraping est déjà en cours."""
