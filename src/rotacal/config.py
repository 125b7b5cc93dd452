import json
import logging
import os

DEFAULTS = {
    'default_pattern': '14/14',
    'default_months': 12,
    'log_level': 'WARNING',
}


def _config_path():
    return os.path.join(os.path.expanduser('~'), '.rotacal', 'rotacal_config.json')


def load_config():
    path = _config_path()
    cfg = dict(DEFAULTS)
    if not os.path.exists(path):
        return cfg
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        logging.warning(f"Konfiguration {path} nicht lesbar, nutze Standardwerte: {e}")
        return cfg
    if not isinstance(stored, dict):
        logging.warning(f"Konfiguration {path} ist kein JSON-Objekt, nutze Standardwerte")
        return cfg
    cfg.update(stored)
    return cfg


def save_config(cfg: dict):
    """Speichert die Einstellungen vollständig, fehlende Schlüssel mit Standardwerten."""
    path = _config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump({**DEFAULTS, **cfg}, f, ensure_ascii=False, indent=2)
