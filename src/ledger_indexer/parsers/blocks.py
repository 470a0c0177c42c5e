from ledger_indexer.utils import parse_uint


class BlockParser:
    @staticmethod
    def parse_raw(raw_block: dict) -> dict:
        header = raw_block['header']
        proof = header.get('proof') or {}
        return {
            'height': parse_uint(header['height']),
            'exec_height': parse_uint(header['execHeight']),
            'block_hash': raw_block['hash'],
            'prev_hash': header['prevHash'],
            'order_root': header['orderRoot'],
            'state_root': header['stateRoot'],
            'proposer': header['proposer'],
            'proof_bitmap': proof.get('bitmap', ''),
            'proof_round': parse_uint(proof.get('round', 0)),
            'proof_signature': proof.get('signature', ''),
            'validator_version': parse_uint(header['validatorVersion']),
            'timestamp': header['timestamp'],
            'transactions_count': len(raw_block.get('orderedTxHashes') or []),
        }

class ValidatorParser:
    @staticmethod
    def parse_raw(raw_validator: dict, version: int) -> dict:
        return {
            'pubkey': raw_validator['pubkey'],
            'propose_weight': int(raw_validator['proposeWeight']),
            'vote_weight': int(raw_validator['voteWeight']),
            'version': version,
        }
