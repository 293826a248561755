"""
WSGI entry point for bjjfed
Use this with production WSGI servers like Gunicorn or uWSGI
"""
import os

from bjjfed import create_app
from bjjfed.config import ProductionConfig
from bjjfed.db import ensure_data_dir

ensure_data_dir(ProductionConfig.DATABASE_PATH)

# WSGI application (runs the start-up cloud sync and the resync scheduler)
application = create_app(ProductionConfig)

if __name__ == '__main__':
    # For development/testing only
    # In production, use: gunicorn -c gunicorn.conf.py wsgi:application
    port = int(os.environ.get('PORT', 5000))
    application.run(host='0.0.0.0', port=port, debug=False)
