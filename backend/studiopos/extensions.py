# Overview: Flask extension instances for database access.

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
