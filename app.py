from flask import Flask
from markupsafe import escape
from flask_mail import Mail
import click
import logging
from logging.config import dictConfig
import os
from database import db
from config import Config
from data_tables.answer import Answer
from data_tables.question import Question
from data_tables.response import Response, ResponseEntry
from data_tables.survey import Survey
from data_tables.section import Section
from routes.take_survey import survey_bp
from utils.excel_upload import check_if_excel_file, import_survey_file


def configure_logging(level):
    """Send every module logger to stdout once (the wizard logs through logging.getLogger)."""
    root = logging.getLogger()
    if root.handlers:
        return
    dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': {'format': '%(asctime)s %(levelname)s:%(name)s:%(message)s'},
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'default',
                'stream': 'ext://sys.stdout',
            },
        },
        'root': {'level': level, 'handlers': ['console']},
    })


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize Flask-Mail (completion notifications)
    Mail(app)

    # connect database to app
    db.init_app(app)

    # register blueprints
    app.register_blueprint(survey_bp)

    register_commands(app)

    # home route
    @app.route('/')
    def home():
        surveys = Survey.query.order_by(Survey.created_at.desc()).all()
        links = ''.join(
            f"<li><a href='/survey/{survey.id}'>{escape(survey.title)}</a></li>" for survey in surveys
        )
        return f"""
        <h1>Survey Wizard</h1>
        <p>System is running!</p>
        <ul>{links}</ul>
        """

    #create database folder if it doesnt exist (sqlite only)
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///') and ':memory:' not in app.config['SQLALCHEMY_DATABASE_URI']:
        database_folder = os.path.dirname(app.config['SQLALCHEMY_DATABASE_URI'][len('sqlite:///'):])
        if database_folder and not os.path.exists(database_folder):
            os.makedirs(database_folder)

    # create database tables when app starts
    with app.app_context():
        db.create_all()
        app.logger.info("database tables created")

    return app


def register_commands(app):

    @app.cli.command('import-survey')
    @click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
    @click.option('--title', default=None, help='Survey title (defaults to the file name).')
    @click.option('--description', default='', help='Survey description.')
    def import_survey_command(file_path, title, description):
        """Create a survey from an Excel sheet of sections and questions."""
        if not check_if_excel_file(file_path, app.config['ALLOWED_FILE_TYPES']):
            raise click.BadParameter('Invalid file type. Please use Excel (.xlsx or .xls)')

        if title is None:
            title = os.path.splitext(os.path.basename(file_path))[0]

        survey = import_survey_file(file_path, title, description)
        click.echo(f'Survey "{survey.title}" created with {len(survey.sections)} sections (id {survey.id})')


if __name__ == '__main__':
    create_app().run(debug=True, port=5001, use_reloader=False)
