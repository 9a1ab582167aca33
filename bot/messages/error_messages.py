"""
Error Message Templates.

Russian messages for users, English for logs.
Provides friendly error messages without technical details for users.
"""

START_FAILED = "⚠️ Что-то пошло не так. Попробуйте ещё раз позже."

DATABASE_ERROR = (
    "❌ Возникла временная проблема с базой данных.\n"
    "Пожалуйста, попробуйте позже."
)

GENERIC_ERROR = (
    "⚠️ Произошла ошибка. "
    "Пожалуйста, попробуйте позже."
)
