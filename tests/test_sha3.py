import hashlib

import pytest

import sha3
from keccak import KeccakSponge, RoundConstantMode

KNOWN_ANSWERS = [
    (sha3.sha3_256, b'',
     'a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a'),
    (sha3.sha3_256, b'abc',
     '3a985da74fe225b2045c172d6bd390bd855f086e3e9d525b46bfe24511431532'),
    (sha3.sha3_224, b'',
     '6b4e03423667dbb73b6e15454f0eb1abd4597f9a1b078e3f5b5a6bc7'),
    (sha3.sha3_224, b'abc',
     'e642824c3f8cf24ad09234ee7d3c766fc9a3a5168d0c94ad73b46fdf'),
    (sha3.sha3_384, b'',
     '0c63a75b845e4f7d01107d852e4c2485c51a50aaaa94fc61995e71bbee983a2a'
     'c3713831264adb47fb6bd1e058d5f004'),
    (sha3.sha3_512, b'',
     'a69f73cca23a9ac5c8b567dc185a756e97c982164fe25859e0d1dcc1475c80a6'
     '15b2123af1f5f94c11e3e9402c3ac558f500199d95b6d3e301758586281dcd26'),
]

FUNCTIONS = {
    'sha3_224': (sha3.sha3_224, hashlib.sha3_224),
    'sha3_256': (sha3.sha3_256, hashlib.sha3_256),
    'sha3_384': (sha3.sha3_384, hashlib.sha3_384),
    'sha3_512': (sha3.sha3_512, hashlib.sha3_512),
}


@pytest.mark.parametrize('function,data,expected', KNOWN_ANSWERS)
def test_known_answers(function, data, expected):
    assert function(data) == bytes.fromhex(expected)


@pytest.mark.slow
def test_one_million_a():
    expected = '5c8875ae474a3634ba4fd55ec85bffd661f32aca75c6d699d0cdcb6c115891c1'
    assert sha3.sha3_256(b'a' * 1000000) == bytes.fromhex(expected)


@pytest.mark.parametrize('name', sorted(FUNCTIONS))
def test_digest_size(name):
    function, _ = FUNCTIONS[name]
    assert len(function(b'abc')) == sha3.VARIANTS[name].digest_size
    assert isinstance(function(b'abc'), bytes)


@pytest.mark.parametrize('name', sorted(FUNCTIONS))
@pytest.mark.parametrize('delta', [-1, 0, 1])
def test_rate_boundaries(name, delta):
    function, reference = FUNCTIONS[name]
    data = bytes(range(256)) * 2
    data = data[:sha3.VARIANTS[name].rate + delta]
    assert function(data) == reference(data).digest()


@pytest.mark.parametrize('name', sorted(FUNCTIONS))
def test_two_full_blocks(name):
    function, reference = FUNCTIONS[name]
    data = b'\x5a' * (2 * sha3.VARIANTS[name].rate)
    assert function(data) == reference(data).digest()


def test_variant_presets():
    assert [(v.rate, v.delimiter, v.digest_size)
            for _, v in sorted(sha3.VARIANTS.items())] == [
        (144, 0x06, 28), (136, 0x06, 32), (104, 0x06, 48), (72, 0x06, 64),
    ]


def test_variant_lookup():
    assert sha3.variant('SHA3-256') is sha3.VARIANTS['sha3_256']
    with pytest.raises(ValueError):
        sha3.variant('sha3_1024')


def test_new_streams():
    sponge = sha3.new('sha3_512', b'ab')
    assert isinstance(sponge, KeccakSponge)
    sponge.absorb(b'c')
    assert sponge.finalize(64) == hashlib.sha3_512(b'abc').digest()


def test_digest_by_name_with_lfsr():
    data = b'lfsr driven digest'
    assert sha3.digest('sha3_384', data, RoundConstantMode.LFSR) == \
        hashlib.sha3_384(data).digest()


def test_deterministic():
    assert sha3.sha3_224(b'repeat') == sha3.sha3_224(b'repeat')
