# atelier_sur_mesure/settings.py
from pathlib import Path
import os

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'atelier-secret-key-change-me')
DEBUG = os.environ.get('DJANGO_DEBUG', '1') in {'1', 'true', 'True'}
ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '127.0.0.1,localhost,testserver').split(',')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    # Apps du projet
    'customers.apps.CustomersConfig',
    'custom_orders.apps.CustomOrdersConfig',
    'billing.apps.BillingConfig',
    'monitoring.apps.MonitoringConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'atelier_sur_mesure.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'atelier_sur_mesure.wsgi.application'
ASGI_APPLICATION = 'atelier_sur_mesure.asgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('DATABASE_PATH', BASE_DIR / 'db.sqlite3'),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'fr-fr'
TIME_ZONE = 'Africa/Abidjan'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGIN_URL = '/admin/login/'

CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_HTTPONLY = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Journalisation
MONITORING_LOG_DIR = Path(os.environ.get('MONITORING_LOG_DIR', BASE_DIR / 'logs'))

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '[{levelname} {asctime}] {name}: {message}', 'style': '{'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'loggers': {
        'billing': {'handlers': ['console'], 'level': os.environ.get('BILLING_LOG_LEVEL', 'INFO')},
        'custom_orders': {'handlers': ['console'], 'level': 'INFO'},
        'monitoring': {'handlers': ['console'], 'level': 'INFO'},
    },
}

# Numérotation des documents (TAG-JJMMAA-NNNN)
BILLING_INVOICE_TAG = os.environ.get('BILLING_INVOICE_TAG', 'FAC')
BILLING_RECEIPT_TAG = os.environ.get('BILLING_RECEIPT_TAG', 'REC')
CUSTOM_ORDER_TAG = os.environ.get('CUSTOM_ORDER_TAG', 'SM')
BILLING_NUMBER_ATTEMPTS = int(os.environ.get('BILLING_NUMBER_ATTEMPTS', '5'))
BILLING_CURRENCY = os.environ.get('BILLING_CURRENCY', 'FCFA')

# Identité de l'atelier imprimée sur les factures et reçus
ATELIER_NAME = os.environ.get('ATELIER_NAME', 'Atelier Sur-Mesure')
ATELIER_ADDRESS = os.environ.get('ATELIER_ADDRESS', "Abidjan, Côte d'Ivoire")
ATELIER_PHONE = os.environ.get('ATELIER_PHONE', '')
ATELIER_WEBSITE = os.environ.get('ATELIER_WEBSITE', '')

# Notification des reçus (local | smsing)
RECEIPT_NOTIFIER_BACKEND = os.environ.get('RECEIPT_NOTIFIER_BACKEND', 'local').lower()
SMSING_BASE_URL = os.getenv('SMSING_BASE_URL', 'https://panel.smsing.app/smsAPI')
SMSING_API_KEY = os.getenv('SMSING_API_KEY')
SMSING_API_TOKEN = os.getenv('SMSING_API_TOKEN')
SMSING_FROM = os.getenv('SMSING_FROM', 'ATELIER')
