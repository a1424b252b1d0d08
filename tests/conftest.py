"""
Shared fixtures: a clean I18N registry per test, either with small
hand-written tables or with the packaged locales.
"""
import pytest
import pytest_asyncio

from tarjama.core.i18n import I18N
from tarjama.infra import db
from tarjama.infra.migrate import migrate


EN = {
    "js": {
        "hello": "Hello",
        "greeting": "Hello, %{name}!",
        "posted_by": "Posted by {{username}}",
        "only_en": "Only in English",
        "empty_in_ar": "English text",
        "dup": "en dup",
        "pi": 3.14,
        "topic": {
            "title": "Topic",
            "replies": {
                "zero": "No replies",
                "one": "%{count} reply",
                "other": "%{count} replies",
            },
        },
        "partial": {"one": "one thing"},
        "number": {
            "format": {"separator": ".", "delimiter": ","},
            "human": {
                "storage_units": {
                    "format": "%n %u",
                    "units": {
                        "byte": {"one": "Byte", "other": "Bytes"},
                        "kb": "KB",
                        "mb": "MB",
                        "gb": "GB",
                        "tb": "TB",
                    },
                }
            },
        },
        "groups": {
            "members_MF": "{count, plural, =0 {No members} one {# member} other {# members}}",
            "only_en_MF": "{name} only here",
        },
    },
    "admin_js": {"admin": {"title": "Admin", "reports": "Reports"}},
}

AR = {
    "js": {
        "hello": "مرحبا",
        "empty_in_ar": "",
        "topic": {
            "replies": {
                "zero": "لا ردود",
                "one": "رد واحد",
                "two": "ردان",
                "few": "%{count} ردود",
                "many": "%{count} ردًا",
                "other": "%{count} رد",
            },
        },
        "groups": {
            "members_MF": "{count, plural, =0 {لا أعضاء} one {عضو واحد} two {عضوان} few {# أعضاء} many {# عضوًا} other {# عضو}}",
        },
    },
    "admin_js": {"admin": {"title": "الإدارة", "only_extra": "إضافي"}},
}

FR = {
    "js": {
        "hello": "Bonjour",
        "dup": "fr dup",
        "only_fr": "Seulement en français",
    }
}


@pytest.fixture(autouse=True)
def clean_i18n():
    I18N.reset()
    yield
    I18N.reset()


@pytest.fixture
def i18n():
    """I18N with the small en/ar/fr tables above."""
    I18N.register("en", EN)
    I18N.register("ar", AR)
    I18N.register("fr", FR)
    return I18N


@pytest.fixture
def packaged():
    """I18N with the locales shipped in tarjama/locales."""
    I18N.load_locales()
    return I18N


@pytest_asyncio.fixture
async def database(tmp_path):
    await db.init_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    db.init_sessionmaker()
    await migrate()
    yield db
    await db.dispose()
