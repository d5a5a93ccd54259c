import os 

"""
for all the settings for flask stored in one place such as secret key,
database, mail, and how the survey wizard behaves

every setting can be overridden with an environment variable of the same name
"""


def env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config: 

    # signs the session cookie, which is where survey answers live until finished
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-later')

    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    DATABASE_PATH = os.path.join(BASE_DIR, 'database', 'survey_wizard.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI', f'sqlite:///{DATABASE_PATH}')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # INFO shows section moves and completions, DEBUG everything
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # survey settings

    # previously shown questions must be answered before Next / Finish
    SURVEY_REQUIRE_ANSWERS = env_flag('SURVEY_REQUIRE_ANSWERS', True)
    # None means: show render errors only when the app runs in debug mode
    SURVEY_SHOW_RENDER_ERRORS = env_flag('SURVEY_SHOW_RENDER_ERRORS', None)
    # where to send a note when someone finishes a survey (optional)
    SURVEY_NOTIFY_EMAIL = os.environ.get('SURVEY_NOTIFY_EMAIL')

    # import settings

    ALLOWED_FILE_TYPES = ['xlsx', 'xls']

    # email configuration 
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = env_flag('MAIL_USE_TLS', True)
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')  # Your email
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')  # Your app password
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', os.environ.get('MAIL_USERNAME'))


class TestConfig(Config):

    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SURVEY_REQUIRE_ANSWERS = True
    SURVEY_NOTIFY_EMAIL = None
    SURVEY_SHOW_RENDER_ERRORS = None
    MAIL_SUPPRESS_SEND = True
    MAIL_USERNAME = None
    MAIL_PASSWORD = None
    MAIL_DEFAULT_SENDER = None
