# utils/i18n.py

"""Internationalization support."""
import locale
from typing import Dict

class Translator:
    """Simple translation system for multilingual support."""

    def __init__(self):
        self.current_lang = 'en'
        self.translations: Dict[str, Dict[str, str]] = {
            'en': {
                # Launcher window
                'app_title': 'Quick Launch',
                'search_hint': 'Type to search apps, files, commands...',
                'first_run_notice': 'Welcome! Launcher hotkey: {} (change it in config.json)',

                # Results
                'no_results': 'No results found',
                'application': 'Application',
                'calc_subtitle': '{} (press Enter to copy)',
                'clipboard_subtitle': 'Clipboard (press Enter to copy)',

                # Context actions
                'action_open': 'Open',
                'action_admin': 'Run as Administrator',
                'action_reveal': 'Show in File Manager',
                'action_copy_path': 'Copy Path',

                # File index status
                'index_not_indexed': 'Not indexed',
                'index_cleared': 'Index cleared',
                'index_scanning': 'Scanning files...',
                'index_scanning_dir': 'Scanning {}...',
                'index_ready': '{} files indexed in {:.3f}s',
                'index_failed': 'Indexing failed',

                # Command line
                'cli_no_results': 'No results.',
                'cli_outcome': 'Result: {}',
                'cli_indexing': 'Indexing files',
                'cli_no_actions': 'No actions available for {}',
            },
            'de': {
                'app_title': 'Schnellstart',
                'search_hint': 'Apps, Dateien, Befehle suchen...',
                'first_run_notice': 'Willkommen! Tastenkürzel: {} (änderbar in config.json)',

                'no_results': 'Keine Ergebnisse gefunden',
                'application': 'Anwendung',
                'calc_subtitle': '{} (Eingabe zum Kopieren)',
                'clipboard_subtitle': 'Zwischenablage (Eingabe zum Kopieren)',

                'action_open': 'Öffnen',
                'action_admin': 'Als Administrator ausführen',
                'action_reveal': 'Im Dateimanager anzeigen',
                'action_copy_path': 'Pfad kopieren',

                'index_not_indexed': 'Nicht indiziert',
                'index_cleared': 'Index geleert',
                'index_scanning': 'Dateien werden durchsucht...',
                'index_scanning_dir': 'Durchsuche {}...',
                'index_ready': '{} Dateien in {:.3f}s indiziert',
                'index_failed': 'Indizierung fehlgeschlagen',

                'cli_no_results': 'Keine Ergebnisse.',
                'cli_outcome': 'Ergebnis: {}',
                'cli_indexing': 'Dateien werden indiziert',
                'cli_no_actions': 'Keine Aktionen für {} verfügbar',
            }
        }

        # Auto-detect system language
        try:
            system_lang = locale.getlocale()[0]
            if system_lang and system_lang.startswith('de'):
                self.current_lang = 'de'
        except ValueError:
            pass

    def set_language(self, lang_code: str):
        """Set the current language."""
        if lang_code in self.translations:
            self.current_lang = lang_code

    def get(self, key: str, *args) -> str:
        """Get translated string, with optional formatting."""
        text = self.translations[self.current_lang].get(key, key)
        if args:
            try:
                return text.format(*args)
            except (IndexError, KeyError, ValueError):
                return text
        return text

# Global translator instance
translator = Translator()
