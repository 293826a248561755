"""Centralized configuration for bjjfed."""
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration loaded from environment variables."""
    SECRET_KEY = os.getenv('SECRET_KEY')
    DATABASE_PATH = os.getenv('DATABASE_PATH', '/data/bjjfed.db')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    RATE_LIMIT_PER_MINUTE = int(os.getenv('RATE_LIMIT_PER_MINUTE', '60'))
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = os.getenv('SESSION_COOKIE_HTTPONLY', 'true').lower() == 'true'
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    FORCE_HTTPS = os.getenv('FORCE_HTTPS', 'false').lower() == 'true'
    PORT = int(os.getenv('PORT', '5000'))

    # Supabase (PostgREST) backend
    SUPABASE_URL = os.getenv('SUPABASE_URL', '')
    SUPABASE_KEY = os.getenv('SUPABASE_KEY', '')
    SYNC_WEBHOOK_TOKEN = os.getenv('SYNC_WEBHOOK_TOKEN', '')
    SYNC_ON_STARTUP = os.getenv('SYNC_ON_STARTUP', 'true').lower() == 'true'
    SCHEDULER_ENABLED = os.getenv('SCHEDULER_ENABLED', 'true').lower() == 'true'

    # Gemini classifier
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.0-flash')
    GEMINI_API_URL = os.getenv('GEMINI_API_URL', 'https://generativelanguage.googleapis.com/v1beta')

    HTTP_TIMEOUT_SECONDS = int(os.getenv('HTTP_TIMEOUT_SECONDS', '10'))
    AUDIT_MAX_WORKERS = int(os.getenv('AUDIT_MAX_WORKERS', '8'))
    PAYMENT_LINK = os.getenv('PAYMENT_LINK', 'https://buy.stripe.com/test_7sY8wQd2NcVgagTayNcs801')
    DEFAULT_PAY_KEY = os.getenv('DEFAULT_PAY_KEY', 'financeiro@federacao.com.br')
    NOTIFICATION_TTL_SECONDS = int(os.getenv('NOTIFICATION_TTL_SECONDS', '8'))


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SCHEDULER_ENABLED = False
    SYNC_ON_STARTUP = False
    SUPABASE_URL = ''
    SUPABASE_KEY = ''
    GEMINI_API_KEY = ''
    SYNC_WEBHOOK_TOKEN = 'test-sync-token'
