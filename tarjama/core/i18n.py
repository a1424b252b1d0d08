from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from telegram import Update

from . import dates
from .errors import LocaleLoadError, MessageFormatError
from .interpolation import interpolate
from .message_format import Compiled, compile_message
from .numbers import to_human_size, to_number
from .plural import base_language, categories, is_plural_node


log = logging.getLogger(__name__)

Scope = Union[str, Sequence[str]]


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_json(locale: str, text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError as e:
        raise LocaleLoadError(locale, str(e)) from e
    if not isinstance(data, dict):
        raise LocaleLoadError(locale, "top level must be an object")
    return data


class I18N:
    """Process-wide translation registry.

    Tables are loaded once and only read afterwards. Each locale file holds a
    ``js`` tree (the main table); any other top-level tree is kept as that
    locale's extras and is consulted when a scope is missing from ``js``.
    """

    SEPARATOR = "."

    _translations: Dict[str, Dict[str, Any]] = {}
    _extras: Dict[str, Dict[str, Any]] = {}
    _compiled_mfs: Dict[str, Dict[str, Compiled]] = {}
    _locale: Optional[str] = None
    _default_locale: str = "en"
    _fallback_locale: Optional[str] = None
    no_fallbacks: bool = False
    _verbose: bool = False
    _verbose_keys: Dict[str, int] = {}
    _chat_locale: Dict[int, str] = {}
    _user_locale: Dict[int, str] = {}

    # -- loading -----------------------------------------------------------

    @classmethod
    def configure(cls, settings: Any) -> None:
        cls._default_locale = settings.DEFAULT_LOCALE
        cls._fallback_locale = settings.FALLBACK_LOCALE
        cls.no_fallbacks = settings.NO_FALLBACKS
        if settings.VERBOSE_LOCALIZATION:
            cls.enable_verbose_localization()

    @classmethod
    def load_locales(cls, extra_dir: Optional[Path] = None) -> List[str]:
        tables: Dict[str, Dict[str, Any]] = {}
        for entry in sorted(resources.files("tarjama.locales").iterdir(), key=lambda p: p.name):
            if not entry.name.endswith(".json"):
                continue
            code = entry.name[:-len(".json")]
            try:
                tables[code] = _read_json(code, entry.read_text(encoding="utf-8"))
            except (OSError, LocaleLoadError) as e:
                log.warning("Failed to load locale %s: %s", code, e)

        if extra_dir is not None:
            for path in sorted(Path(extra_dir).glob("*.json")):
                code = path.stem
                try:
                    override = _read_json(code, path.read_text(encoding="utf-8"))
                except (OSError, LocaleLoadError) as e:
                    log.warning("Failed to load locale override %s: %s", path, e)
                    continue
                tables[code] = deep_merge(tables.get(code, {}), override)

        for code, table in tables.items():
            cls.register(code, table)
        dates.load_date_data()

        loaded = cls.available_locales()
        log.info("Loaded locales: %s", ", ".join(loaded) or "none")
        return loaded

    @classmethod
    def register(cls, locale: str, table: Dict[str, Any]) -> None:
        if not isinstance(table, dict):
            raise LocaleLoadError(locale, "top level must be an object")
        cls._translations[locale] = table.get("js") or {}
        cls._extras[locale] = {k: v for k, v in table.items() if k != "js"}
        compiled: Dict[str, Compiled] = {}
        for key, source in cls._mf_sources(cls._translations[locale], ""):
            cls._compile_into(compiled, locale, key, source)
        for key, source in cls._mf_sources(cls._extras[locale], ""):
            cls._compile_into(compiled, locale, key, source)
        cls._compiled_mfs[locale] = compiled

    @classmethod
    def _mf_sources(cls, tree: Dict[str, Any], prefix: str) -> Iterator[tuple[str, str]]:
        for key, value in tree.items():
            path = f"{prefix}{cls.SEPARATOR}{key}" if prefix else key
            if isinstance(value, dict):
                yield from cls._mf_sources(value, path)
            elif isinstance(value, str) and key.endswith("_MF"):
                yield path, value

    @staticmethod
    def _compile_into(compiled: Dict[str, Compiled], locale: str, key: str, source: str) -> None:
        try:
            compiled[key] = compile_message(source, locale)
        except MessageFormatError as e:
            log.warning("Skipping message format %s.%s: %s", locale, key, e)

    @classmethod
    def reset(cls) -> None:
        cls._translations = {}
        cls._extras = {}
        cls._compiled_mfs = {}
        cls._locale = None
        cls._default_locale = "en"
        cls._fallback_locale = None
        cls.no_fallbacks = False
        cls._verbose = False
        cls._verbose_keys = {}
        cls._chat_locale = {}
        cls._user_locale = {}

    # -- locale state --------------------------------------------------------

    @classmethod
    def available_locales(cls) -> List[str]:
        return sorted(cls._translations)

    @classmethod
    def has_locale(cls, code: Optional[str]) -> bool:
        return code is not None and code in cls._translations

    @classmethod
    def current_locale(cls) -> str:
        return cls._locale or cls._default_locale

    @classmethod
    def set_locale(cls, code: Optional[str]) -> None:
        cls._locale = code

    @classmethod
    def default_locale(cls) -> str:
        return cls._default_locale

    @classmethod
    def set_default_locale(cls, code: str) -> None:
        cls._default_locale = code

    @classmethod
    def fallback_locale(cls) -> Optional[str]:
        return cls._fallback_locale

    @classmethod
    def set_fallback_locale(cls, code: Optional[str]) -> None:
        cls._fallback_locale = code

    @classmethod
    def _chain(cls, locale: str) -> List[str]:
        if cls.no_fallbacks:
            return [locale]
        chain: List[str] = []
        for code in (locale, cls._fallback_locale, cls._default_locale, "en"):
            if code and code not in chain:
                chain.append(code)
        return chain

    # -- lookup ------------------------------------------------------------

    @classmethod
    def _join(cls, scope: Scope) -> str:
        if isinstance(scope, str):
            return scope
        return cls.SEPARATOR.join(str(part) for part in scope)

    @staticmethod
    def _dig(tree: Any, parts: Sequence[str]) -> Any:
        node = tree
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    @classmethod
    def lookup(
        cls,
        scope: Scope,
        *,
        locale: Optional[str] = None,
        scope_prefix: Optional[Scope] = None,
        default_value: Any = None,
    ) -> Any:
        locale = locale or cls.current_locale()
        scope = cls._join(scope)
        if scope_prefix:
            scope = cls._join(scope_prefix) + cls.SEPARATOR + scope
        parts = scope.split(cls.SEPARATOR)
        if parts[0] != "js":
            parts.insert(0, "js")

        node = cls._dig({"js": cls._translations.get(locale, {})}, parts)
        if node is None and cls._extras.get(locale):
            node = cls._dig(cls._extras[locale], scope.split(cls.SEPARATOR))
        if node is None:
            node = default_value
        return node

    @classmethod
    def pluralize(
        cls,
        node: Any,
        scope: str,
        count: float,
        locale: str,
        ignore_missing: bool = False,
        marker_locale: Optional[str] = None,
    ) -> Any:
        if not isinstance(node, dict):
            return node
        keys = categories(locale, count)
        for key in keys + ["other"]:
            if node.get(key) is not None:
                return node[key]
        if ignore_missing:
            return None
        return cls.missing_translation(scope, keys[0], locale=marker_locale or locale)

    @classmethod
    def missing_translation(cls, scope: Scope, key: Optional[str] = None, locale: Optional[str] = None) -> str:
        message = "[" + (locale or cls.current_locale()) + cls.SEPARATOR + cls._join(scope)
        if key:
            message += cls.SEPARATOR + key
        return message + "]"

    # -- translate -----------------------------------------------------------

    @classmethod
    def translate(cls, scope: Scope, /, **options: Any) -> str:
        text = cls._translate(scope, dict(options))
        if cls._verbose:
            return cls._verbose_wrap(cls._join(scope), options, text)
        return text

    @classmethod
    def _translate(cls, scope: Scope, options: Dict[str, Any]) -> str:
        locale = str(options.pop("locale", None) or cls.current_locale())
        scope_prefix = options.pop("scope", None)
        default_value = options.pop("default_value", None)
        count = options.get("count")
        needs_plural = isinstance(count, (int, float)) and not isinstance(count, bool)

        full_scope = cls._join(scope)
        if scope_prefix:
            full_scope = cls._join(scope_prefix) + cls.SEPARATOR + full_scope

        def find(code: str, ignore_missing: bool) -> Any:
            node = cls.lookup(scope, locale=code, scope_prefix=scope_prefix, default_value=default_value)
            if node is not None and needs_plural:
                node = cls.pluralize(node, full_scope, count, code, ignore_missing, marker_locale=locale)
            return node

        translation = find(locale, ignore_missing=not cls.no_fallbacks)
        if not cls.no_fallbacks:
            if not translation and cls._fallback_locale:
                translation = find(cls._fallback_locale, True)
            if not translation and locale != cls._default_locale:
                translation = find(cls._default_locale, False)
            if not translation and locale != "en":
                translation = find("en", False)

        if isinstance(translation, (int, float)) and not isinstance(translation, bool):
            translation = str(translation)
        if not isinstance(translation, str):
            log.debug("Missing translation %s.%s", locale, full_scope)
            return cls.missing_translation(full_scope, locale=locale)

        try:
            return interpolate(translation, options, render=lambda name, value: cls._render_value(locale, name, value))
        except (TypeError, ValueError) as e:
            log.warning("Interpolation of %s.%s failed: %s", locale, full_scope, e)
            return cls.missing_translation(full_scope, locale=locale)

    @classmethod
    def _render_value(cls, locale: str, name: str, value: Any) -> str:
        if name == "count" and isinstance(value, int) and not isinstance(value, bool):
            return cls.to_number(value, locale=locale, precision=0)
        return str(value)

    # -- verbose localization ------------------------------------------------

    @classmethod
    def enable_verbose_localization(cls) -> None:
        cls._verbose = True
        cls._verbose_keys = {}

    @classmethod
    def disable_verbose_localization(cls) -> None:
        cls._verbose = False

    @classmethod
    def _verbose_wrap(cls, scope: str, options: Dict[str, Any], text: str) -> str:
        current = cls._verbose_keys.get(scope)
        if current is None:
            current = len(cls._verbose_keys) + 1
            cls._verbose_keys[scope] = current
            message = f"Translation #{current}: {scope}"
            if options:
                message += ", parameters: " + json.dumps(options, ensure_ascii=False, default=str)
            log.info(message)
        return f"{text} (#{current})"

    # -- message format / numbers -------------------------------------------

    @classmethod
    def message_format(
        cls,
        key: str,
        /,
        locale: Optional[str] = None,
        args: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> str:
        """Format a compiled ``*_MF`` message.

        Arguments come from ``args`` merged with keyword arguments; use the
        mapping for argument names such as ``locale`` or ``args``.
        """
        values = {**(args or {}), **kwargs}
        for code in cls._chain(str(locale or cls.current_locale())):
            formatter = cls._compiled_mfs.get(code, {}).get(key)
            if formatter is not None:
                try:
                    return formatter(values)
                except MessageFormatError as e:
                    return str(e)
        return f"Missing Key: {key}"

    @classmethod
    def to_number(cls, number: float, locale: Optional[str] = None, **options: Any) -> str:
        settings: Dict[str, Any] = {
            "precision": 3,
            "separator": ".",
            "delimiter": ",",
            "strip_insignificant_zeros": False,
        }
        for code in reversed(cls._chain(locale or cls.current_locale())):
            fmt = cls.lookup("number.format", locale=code)
            if isinstance(fmt, dict):
                settings.update({k: v for k, v in fmt.items() if k in settings})
        settings.update(options)
        return to_number(number, **settings)

    @classmethod
    def to_human_size(cls, number: float, locale: Optional[str] = None) -> str:
        locale = locale or cls.current_locale()

        def unit_label(unit: Optional[str], size: float) -> str:
            if unit is None:
                return cls.translate("number.human.storage_units.units.byte", locale=locale, count=int(size))
            return cls.translate(f"number.human.storage_units.units.{unit}", locale=locale)

        fmt = cls.translate("number.human.storage_units.format", locale=locale, default_value="%n %u")
        separator = cls.lookup("number.format.separator", locale=locale, default_value=".")
        return to_human_size(number, unit_label, fmt=fmt, separator=separator)

    # -- tooling -------------------------------------------------------------

    @classmethod
    def _leaves(cls, tree: Dict[str, Any], prefix: str = "") -> Iterator[str]:
        for key, value in tree.items():
            path = f"{prefix}{cls.SEPARATOR}{key}" if prefix else key
            if isinstance(value, dict) and not is_plural_node(value):
                yield from cls._leaves(value, path)
            else:
                yield path

    @classmethod
    def missing_keys(cls, locale: str, reference: str = "en") -> List[str]:
        expected = set(cls._leaves(cls._translations.get(reference, {})))
        present = set(cls._leaves(cls._translations.get(locale, {})))
        return sorted(expected - present)

    # -- per-chat / per-user locale ------------------------------------------

    @classmethod
    def set_chat_locale(cls, chat_id: int, code: str) -> bool:
        if code not in cls._translations:
            return False
        cls._chat_locale[chat_id] = code
        return True

    @classmethod
    def get_chat_locale(cls, chat_id: int) -> str | None:
        return cls._chat_locale.get(chat_id)

    @classmethod
    def clear_chat_locale(cls, chat_id: int) -> None:
        cls._chat_locale.pop(chat_id, None)

    @classmethod
    def set_user_locale(cls, user_id: int, code: str) -> bool:
        if code not in cls._translations:
            return False
        cls._user_locale[user_id] = code
        return True

    @classmethod
    def get_user_locale(cls, user_id: int) -> str | None:
        return cls._user_locale.get(user_id)

    @classmethod
    def clear_user_locale(cls, user_id: int) -> None:
        cls._user_locale.pop(user_id, None)

    @classmethod
    def pick_locale(cls, update: Update, fallback: Optional[str] = None) -> str:
        # Group override takes precedence in group chats
        chat = update.effective_chat
        if chat and chat.type in {"group", "supergroup"}:
            gl = cls._chat_locale.get(chat.id)
            if gl in cls._translations:
                return gl
        user = update.effective_user
        if user:
            ul = cls._user_locale.get(user.id)
            if ul in cls._translations:
                return ul
            lc = user.language_code
            if lc:
                for code in (lc.replace("-", "_"), base_language(lc)):
                    if code in cls._translations:
                        return code
        if fallback and fallback in cls._translations:
            return fallback
        return cls.default_locale()


def t(scope: Scope, /, **options: Any) -> str:
    return I18N.translate(scope, **options)
