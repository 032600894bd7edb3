# Configurações da aplicação (lidas do ambiente / arquivo .env)

import os
from dotenv import load_dotenv

# Raiz do projeto (onde estão app.py e o .env)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
ENV_PATH = os.path.join(BASE_DIR, ".env")

if os.path.exists(ENV_PATH):
    load_dotenv(ENV_PATH)


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "troque-esta-chave-em-producao")

    # SQLite local por padrão; em produção apontar DATABASE_URL para o Postgres
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///revenda.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR")  # opcional: sem valor, só console

    # Dashboards
    TOP_N = int(os.getenv("TOP_N", "10"))
    MESES_SELETOR = int(os.getenv("MESES_SELETOR", "12"))
    ANOS_SELETOR = int(os.getenv("ANOS_SELETOR", "5"))
    MOEDA = os.getenv("MOEDA", "€")
