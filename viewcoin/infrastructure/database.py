"""
Database: Setup SQLAlchemy e gerenciamento de sessões
Backend persistente do cache de cotações
"""

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import OperationalError, SQLAlchemyError
import logging
from contextlib import contextmanager
from typing import Generator

from viewcoin.domain.exchange_rate import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Gerenciador de banco de dados.
    Responsável por: conexão, session management, criação de tabelas, health checks.
    """

    def __init__(self, url: str = "sqlite:///viewcoin_cache.db", echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine = None
        self.SessionLocal = None

    def initialize(self) -> bool:
        """
        Inicializa engine e session factory.
        Cria tabelas se não existirem (primeira execução).

        Returns:
            bool: True se sucesso, False se erro
        """
        try:
            connect_args = {}
            if self.url.startswith("sqlite"):
                connect_args["check_same_thread"] = False

            self.engine = create_engine(
                self.url,
                pool_pre_ping=True,
                echo=self.echo,
                connect_args=connect_args,
            )

            # Testar conexão
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                logger.info("✓ Conexão ao BD estabelecida")

            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.engine
            )

            Base.metadata.create_all(bind=self.engine)

            logger.info("✓ Database inicializado com sucesso")
            return True

        except OperationalError as e:
            logger.error(f"✗ Erro ao conectar ao BD: {e}")
            return False
        except SQLAlchemyError as e:
            logger.error(f"✗ Erro ao inicializar database: {e}")
            return False

    @property
    def is_initialized(self) -> bool:
        return self.SessionLocal is not None

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Context manager para obter uma session.
        Commit ao sair sem erro, rollback automático em caso de erro.

        Uso:
            with db.get_session() as session:
                row = session.get(ExchangeRateModel, "bitcoin")

        Yields:
            Session: SQLAlchemy session
        """
        if not self.is_initialized:
            raise RuntimeError("Database não inicializado (chame initialize())")

        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"✗ Erro em transação BD: {e}")
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        """
        Verifica saúde da conexão ao BD.

        Returns:
            bool: True se BD está OK
        """
        if self.engine is None:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                logger.debug("✓ Health check BD: OK")
                return True
        except SQLAlchemyError as e:
            logger.error(f"✗ Health check BD falhou: {e}")
            return False

    def close(self):
        """Fecha todas as conexões ao BD"""
        if self.engine:
            self.engine.dispose()
            logger.info("✓ Conexões ao BD fechadas")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# ════════════════════════════════════════════════════════════════
# Helpers de Teste
# ════════════════════════════════════════════════════════════════

def create_test_database() -> Database:
    """
    Cria database em memória para testes.
    StaticPool mantém a mesma conexão (senão cada sessão veria um BD vazio).
    """
    test_db = Database("sqlite:///:memory:")
    test_db.engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    test_db.SessionLocal = sessionmaker(bind=test_db.engine)

    # Criar tabelas
    Base.metadata.create_all(bind=test_db.engine)

    logger.info("✓ Test database criado em memória")
    return test_db
