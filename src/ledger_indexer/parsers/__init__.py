from .blocks import BlockParser, ValidatorParser
from .events import EventParser
from .payloads import PAYLOAD_PARSERS, PayloadDecodeError, parse_payload
from .transactions import ReceiptParser, TransactionParser
