from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

ALLOWED_HOSTS = ['testserver']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
EMAIL_HOST_USER = 'orders@herbsayurmed.test'
DEFAULT_FROM_EMAIL = EMAIL_HOST_USER
ORDERS_NOTIFY_EMAIL = EMAIL_HOST_USER

RAZORPAY_KEY_ID = 'rzp_test_key'
RAZORPAY_KEY_SECRET = 's3cr3t'
RAZORPAY_BASE_URL = 'https://api.razorpay.test/v1'
