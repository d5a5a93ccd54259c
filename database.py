from flask_sqlalchemy import SQLAlchemy

# shared by every model in data_tables/, bound to the app in create_app()
db = SQLAlchemy()
