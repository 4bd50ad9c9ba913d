"""Static FAQ content for the help page."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FAQItem:
    category: str
    question: str
    answer: str


FAQ_ITEMS = [
    FAQItem(
        "Buchungen",
        "Wie kann ich einen Platz reservieren?",
        "Öffne die Platzübersicht und klicke auf einen freien Zeitslot. Prüfe Platz, Zeit und Datum und bestätige die Buchung.",
    ),
    FAQItem(
        "Buchungen",
        "Wie storniere ich eine Buchung?",
        'Unter "Meine Buchungen" findest du bei jeder stornierbaren Buchung den Button "Stornieren".',
    ),
    FAQItem(
        "Buchungen",
        "Wie viele Buchungen kann ich gleichzeitig haben?",
        "Vollmitglieder können bis zu 2 aktive Buchungen gleichzeitig haben. Fördermitglieder können keine Plätze reservieren.",
    ),
    FAQItem(
        "Buchungen",
        "Was ist eine kurzfristige Buchung?",
        "Eine kurzfristige Buchung ist eine Reservierung innerhalb von 24 Stunden. Sie wird nicht auf dein Buchungslimit angerechnet, kann aber nicht storniert werden.",
    ),
    FAQItem(
        "Konto",
        "Wie ändere ich mein Passwort?",
        'Im Profil findest du den Bereich "Passwort ändern". Gib dein aktuelles und dein neues Passwort ein.',
    ),
    FAQItem(
        "Konto",
        "Wie aktiviere ich E-Mail-Benachrichtigungen?",
        "In deinem Profil kannst du E-Mail-Benachrichtigungen einschalten und auswählen, worüber du informiert werden möchtest.",
    ),
    FAQItem(
        "Konto",
        "Wie bestätige ich meine Mitgliedsbeitragszahlung?",
        'Klicke auf "Zahlung bestätigen". Der Vorstand prüft deine Angabe und bestätigt den Zahlungseingang.',
    ),
    FAQItem(
        "Favoriten",
        "Was sind Favoriten?",
        "Favoriten sind Mitglieder, mit denen du oft spielst. Sie werden beim Buchen für andere zuerst vorgeschlagen.",
    ),
    FAQItem(
        "Sperrungen",
        'Was bedeutet "Platz gesperrt"?',
        "Ein gesperrter Platz ist für einen bestimmten Zeitraum nicht buchbar, etwa wegen Wartungsarbeiten, Turnieren oder Trainings.",
    ),
    FAQItem(
        "Sperrungen",
        "Was passiert mit meiner Buchung bei einer Sperrung?",
        "Ist deine Buchung von einer vorübergehenden Sperre betroffen, wird sie ausgesetzt. Du wirst per E-Mail benachrichtigt.",
    ),
]


def filter_faq(items, query=""):
    """Group the items matching ``query`` by category, keeping their order."""
    needle = query.lower()
    grouped = {}
    for item in items:
        if needle and needle not in item.question.lower() and needle not in item.answer.lower():
            continue
        grouped.setdefault(item.category, []).append(item)
    return list(grouped.items())
