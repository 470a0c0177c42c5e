from sqlalchemy import BigInteger, Boolean, Column, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class Block(Base):
    __tablename__ = 'blocks'

    height = Column(BigInteger, primary_key=True, autoincrement=False)
    exec_height = Column(BigInteger, nullable=False)
    block_hash = Column(String(66), nullable=False, unique=True)
    prev_hash = Column(String(66), nullable=False)
    order_root = Column(String(66), nullable=False)
    state_root = Column(String(66), nullable=False)
    proposer = Column(String(66), nullable=False)
    proof_bitmap = Column(Text)
    proof_round = Column(Integer, nullable=False)
    proof_signature = Column(Text)
    validator_version = Column(BigInteger, nullable=False)
    timestamp = Column(String(18), nullable=False)
    transactions_count = Column(Integer, nullable=False)

class Transaction(Base):
    __tablename__ = 'transactions'

    tx_hash = Column(String(66), primary_key=True)
    block = Column(BigInteger, nullable=False, index=True)
    order = Column(Integer, nullable=False)
    chain_id = Column(String(66), nullable=False)
    cycles_limit = Column(String(18), nullable=False)
    cycles_price = Column(String(18), nullable=False)
    method = Column(String(255), nullable=False)
    nonce = Column(String(66), nullable=False)
    payload = Column(Text, nullable=False)
    pubkey = Column(Text, nullable=False)
    service_name = Column(String(255), nullable=False)
    signature = Column(Text, nullable=False)
    timeout = Column(String(18), nullable=False)
    sender = Column(String(66), nullable=False, index=True)
    fee = Column(String(66), nullable=False)
    timestamp = Column(String(18), nullable=False)

class Receipt(Base):
    __tablename__ = 'receipts'

    tx_hash = Column(String(66), primary_key=True)
    block = Column(BigInteger, nullable=False, index=True)
    cycles_used = Column(String(18), nullable=False)
    is_error = Column(Boolean, nullable=False)
    ret = Column(Text, nullable=False)

class Event(Base):
    __tablename__ = 'events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    tx_hash = Column(String(66), nullable=False, index=True)
    block = Column(BigInteger, nullable=False, index=True)
    order = Column(Integer, nullable=False)
    service = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    data = Column(Text, nullable=False)

class BlockValidator(Base):
    __tablename__ = 'block_validators'
    __table_args__ = (UniqueConstraint('pubkey', 'version'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    pubkey = Column(String(68), nullable=False)
    propose_weight = Column(Integer, nullable=False)
    vote_weight = Column(Integer, nullable=False)
    version = Column(BigInteger, nullable=False)

class Asset(Base):
    __tablename__ = 'assets'

    id = Column(Integer, primary_key=True, autoincrement=True)
    asset_id = Column(String(66), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    symbol = Column(String(255), nullable=False)
    supply = Column(String(66), nullable=False)
    precision = Column(Integer, nullable=False)
    account = Column(String(66), nullable=False)
    tx_hash = Column(String(66), nullable=False)

class Transfer(Base):
    __tablename__ = 'transfers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    asset = Column(String(66), nullable=False, index=True)
    from_address = Column(String(66), nullable=False, index=True)
    to_address = Column(String(66), nullable=False, index=True)
    tx_hash = Column(String(66), nullable=False, index=True)
    value = Column(String(66), nullable=False)
    amount = Column(String(100), nullable=False)
    fee = Column(String(66), nullable=False)
    block = Column(BigInteger, nullable=False, index=True)
    timestamp = Column(String(18), nullable=False)

class Balance(Base):
    __tablename__ = 'balances'
    __table_args__ = (UniqueConstraint('address', 'asset_id'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    address = Column(String(66), nullable=False)
    asset_id = Column(String(66), nullable=False)
    balance = Column(String(100), nullable=False)

class Account(Base):
    __tablename__ = 'accounts'

    address = Column(String(66), primary_key=True)
