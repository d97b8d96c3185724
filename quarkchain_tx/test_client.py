"""
Tests for the payload/id helpers handed to RPC and wallet layers, and for
configuration loading.
"""
import pytest

from quarkchain_tx.client import (
    build_unsigned_transaction,
    decode_signature,
    get_canonical_transaction_id,
    get_encoded_signed_payload,
)
from quarkchain_tx.config import ClientConfig, Config, FeeSchedule
from quarkchain_tx.core import Transaction
from quarkchain_tx.errors import InvalidSignatureError, UnsignedTransactionError

PRIVATE_KEY = '0x' + '00' * 31 + '01'
ADDRESS = bytes.fromhex('7e5f4552091a69125d5dfcb7b8c2659029395bdf')


@pytest.fixture
def fields():
    return {
        'gas': '0x7530',
        'gasPrice': '0x2540be400',
        'to': '0x7e5f4552091a69125d5dfcb7b8c2659029395bdf',
        'value': '0x0',
        'fromFullShardKey': '0x0005fc90',
        'toFullShardKey': '0x0005fc90',
    }


def wallet_signature(tx: Transaction) -> str:
    """r || s || v hex, as returned by eth_sign style wallets."""
    return '0x' + (tx.r.rjust(32, b'\x00') + tx.s.rjust(32, b'\x00') + tx.v).hex()


class TestBuildUnsigned:
    def test_fills_network_defaults(self, fields):
        tx = build_unsigned_transaction(fields)
        assert tx.network_id == b'\x03'
        assert tx.version == b'\x01'
        assert not tx.is_signed()

    def test_keeps_explicit_values(self, fields):
        tx = build_unsigned_transaction(dict(fields, networkId='0xff', version='0x0'))
        assert tx.network_id == b'\xff'
        assert tx.version == b''

    def test_drops_signature_fields(self, fields):
        tx = build_unsigned_transaction(dict(fields, v=28, r='0x01', s='0x01'))
        assert tx.v == b'\x1c'
        assert not tx.is_signed()

    def test_uses_config(self, fields):
        config = Config(
            fees=FeeSchedule(tx_gas=1),
            client=ClientConfig(network_id='0x1', version='0x2'),
        )
        tx = build_unsigned_transaction(fields, config)
        assert tx.network_id == b'\x01'
        assert tx.version == b'\x02'
        assert tx.base_fee() == 1


class TestSignedPayload:
    def test_payload_round_trip(self, fields):
        tx = build_unsigned_transaction(fields)
        tx.sign(PRIVATE_KEY)
        payload = get_encoded_signed_payload(tx)
        assert payload.startswith('0x')

        decoded = Transaction.from_serialized(payload)
        assert decoded.raw == tx.raw
        assert decoded.sender_address() == ADDRESS

    def test_payload_requires_signature(self, fields):
        with pytest.raises(UnsignedTransactionError):
            get_encoded_signed_payload(build_unsigned_transaction(fields))

    def test_canonical_id(self, fields):
        tx = build_unsigned_transaction(fields)
        with pytest.raises(UnsignedTransactionError):
            get_canonical_transaction_id(tx)

        tx.sign(PRIVATE_KEY)
        tx_id = get_canonical_transaction_id(tx)
        assert tx_id == '0x' + tx.canonical_id().hex()
        assert len(tx_id) == 66
        assert tx_id != '0x' + tx.full_hash().hex()


class TestDecodeSignature:
    def test_split(self):
        sig = '0x' + '11' * 32 + '22' * 32 + '1b'
        parts = decode_signature(sig)
        assert parts == {'r': b'\x11' * 32, 's': b'\x22' * 32, 'v': b'\x1b'}

    def test_wrong_length(self):
        with pytest.raises(InvalidSignatureError):
            decode_signature('0x' + '11' * 64)

    def test_not_hex(self):
        with pytest.raises(InvalidSignatureError):
            decode_signature('0x' + 'zz' * 65)

    def test_attach_wallet_signature(self, fields):
        signed = build_unsigned_transaction(fields)
        signed.sign(PRIVATE_KEY)

        tx = build_unsigned_transaction(fields)
        tx.apply_signature(**decode_signature(wallet_signature(signed)))
        assert tx.raw == signed.raw
        assert tx.verify_signature()
        assert tx.sender_address() == ADDRESS


class TestConfig:
    def test_defaults(self):
        config = Config.default()
        assert config.fees == FeeSchedule(21000, 32000, 4, 68)
        assert config.client.network_id == '0x3'

    def test_file_round_trip(self, tmp_path):
        config = Config(
            fees=FeeSchedule(tx_gas=100),
            client=ClientConfig(network_id='0xff'),
        )
        path = str(tmp_path / 'conf' / 'tx.json')
        config.to_file(path)

        loaded = Config.from_file(path)
        assert loaded.fees.tx_gas == 100
        assert loaded.fees.tx_creation == 32000
        assert loaded.client.network_id == '0xff'
        assert loaded.to_dict() == config.to_dict()

    def test_partial_file(self, tmp_path):
        path = tmp_path / 'tx.json'
        path.write_text('{"client": {"version": "0x5"}}')
        loaded = Config.from_file(str(path))
        assert loaded.client.version == '0x5'
        assert loaded.fees == FeeSchedule()
