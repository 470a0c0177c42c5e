from ledger_indexer.utils import parse_uint


class TransactionParser:
    @staticmethod
    def parse_raw(raw_tx: dict, height: int, order: int) -> dict:
        return {
            'tx_hash': raw_tx['txHash'],
            'block': height,
            'order': order,
            'chain_id': raw_tx['chainId'],
            'cycles_limit': raw_tx['cyclesLimit'],
            'cycles_price': raw_tx['cyclesPrice'],
            'method': raw_tx['method'],
            'nonce': raw_tx['nonce'],
            'payload': raw_tx['payload'],
            'pubkey': raw_tx['pubkey'],
            'service_name': raw_tx['serviceName'],
            'signature': raw_tx['signature'],
            'timeout': raw_tx['timeout'],
            'sender': raw_tx['sender'],
        }

class ReceiptParser:
    @staticmethod
    def parse_raw(raw_receipt: dict, height: int) -> dict:
        """Flatten the nested service response of a receipt"""
        response = raw_receipt['response']['response']
        code = parse_uint(response['code'])
        return {
            'tx_hash': raw_receipt['txHash'],
            'block': height,
            'cycles_used': raw_receipt['cyclesUsed'],
            'is_error': code != 0,
            'ret': response['succeedData'] if code == 0 else response.get('errorMessage', ''),
        }
