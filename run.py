import os
from app import create_app

# FLASK_ENV picks the config class; production unless told otherwise
app = create_app(os.environ.get('FLASK_ENV', 'production'))

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', '5000')))
