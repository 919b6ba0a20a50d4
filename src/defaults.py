"""Built-in medication set used when the store cannot be read (offline mode)."""

from src.models.medication import Medication, UserID

USER_NAMES: dict[UserID, str] = {
    UserID.PAOLO: "Paolo",
    UserID.BARBARA: "Barbara",
}


_DEFAULT_ROWS: list[dict] = [
    # Paolo
    {"id": "p-retigan", "user_id": "paolo", "name": "RETIGAN Q10", "dosage": "1 Bustina",
     "timing": "Mattina", "frequency": "alternate_days", "notes": "Giorni alterni", "icon": "sachet"},
    {"id": "p-zetavit", "user_id": "paolo", "name": "ZETAVIT Mg+K", "dosage": "1 Bustina",
     "timing": "Mattina", "frequency": "alternate_days", "notes": "Giorni alterni", "icon": "sachet"},
    {"id": "p-uncaria-am", "user_id": "paolo", "name": "UNCARIA", "dosage": "1 Capsula",
     "timing": "Mattina", "frequency": "daily", "icon": "pill"},
    {"id": "p-uncaria-pm", "user_id": "paolo", "name": "UNCARIA", "dosage": "1 Capsula",
     "timing": "Pomeriggio", "frequency": "daily", "icon": "pill"},
    {"id": "p-same", "user_id": "paolo", "name": "SAMe", "dosage": "1 Capsula",
     "timing": "Lontano dai pasti", "frequency": "daily", "icon": "pill"},
    # Barbara
    {"id": "b-osteoral", "user_id": "barbara", "name": "OSTEORAL", "dosage": "1 Capsula",
     "timing": "Colazione", "frequency": "daily", "icon": "pill"},
    {"id": "b-carpino-am", "user_id": "barbara", "name": "CARPINO BIANCO", "dosage": "60 Gocce",
     "timing": "Mattina", "frequency": "daily", "icon": "drop"},
    {"id": "b-ribes-am", "user_id": "barbara", "name": "RIBES NERO", "dosage": "60 Gocce",
     "timing": "Mattina", "frequency": "daily", "icon": "drop"},
    {"id": "b-carpino-pm", "user_id": "barbara", "name": "CARPINO BIANCO", "dosage": "60 Gocce",
     "timing": "Pomeriggio", "frequency": "daily", "icon": "drop"},
    {"id": "b-ribes-pm", "user_id": "barbara", "name": "RIBES NERO", "dosage": "60 Gocce",
     "timing": "Entro le 17:00", "frequency": "daily", "notes": "Importante: Prima delle 17:00",
     "icon": "clock"},
    {"id": "b-uncaria-am", "user_id": "barbara", "name": "UNCARIA", "dosage": "1 Capsula",
     "timing": "Mattina", "frequency": "daily", "icon": "pill"},
    {"id": "b-uncaria-pm", "user_id": "barbara", "name": "UNCARIA", "dosage": "1 Capsula",
     "timing": "Pomeriggio", "frequency": "daily", "icon": "pill"},
    {"id": "b-same", "user_id": "barbara", "name": "SAMe", "dosage": "1 Capsula",
     "timing": "Lontano dai pasti", "frequency": "daily", "icon": "pill"},
]


def default_medications() -> list[Medication]:
    """Fresh copies of the built-in set (callers may mutate the returned list)."""
    return [Medication.model_validate(row) for row in _DEFAULT_ROWS]


__all__ = ["USER_NAMES", "default_medications"]
