class EventParser:
    @staticmethod
    def parse_raw(raw_event: dict, tx_hash: str, height: int, order: int) -> dict:
        return {
            'tx_hash': tx_hash,
            'block': height,
            'order': order,
            'service': raw_event['service'],
            'name': raw_event.get('name', ''),
            'data': raw_event['data'],
        }
