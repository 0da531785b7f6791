'''
SHA-3 hash functions under FIPS 202, built on the Keccak sponge.
'''

from collections import namedtuple

from keccak import KeccakSponge, RoundConstantMode, SHA3_DELIMITER

Variant = namedtuple('Variant', ['name', 'rate', 'delimiter', 'digest_size'])

VARIANTS = {
    'sha3_224': Variant('sha3_224', 144, SHA3_DELIMITER, 28),
    'sha3_256': Variant('sha3_256', 136, SHA3_DELIMITER, 32),
    'sha3_384': Variant('sha3_384', 104, SHA3_DELIMITER, 48),
    'sha3_512': Variant('sha3_512', 72, SHA3_DELIMITER, 64),
}


def variant(name):
    '''
    Look up a SHA-3 preset by name, e.g. 'sha3_256' or 'SHA3-256'.
    '''
    key = name.lower().replace('-', '_')
    if key not in VARIANTS:
        raise ValueError('Unknown SHA-3 variant: {!r}'.format(name))
    return VARIANTS[key]


def new(name, data=b'', mode=RoundConstantMode.TABLE):
    '''
    Sponge configured for a SHA-3 preset, optionally primed with data.
    Finish it with finalize(variant(name).digest_size).
    '''
    preset = variant(name)
    sponge = KeccakSponge(preset.rate, preset.delimiter, mode)
    return sponge.absorb(data)


def digest(name, data, mode=RoundConstantMode.TABLE):
    '''
    One-shot SHA-3 digest of data with the named preset.
    '''
    preset = variant(name)
    return new(preset.name, data, mode).finalize(preset.digest_size)


def sha3_224(data):
    '''
    SHA3-224 digest, 28 bytes.
    '''
    return digest('sha3_224', data)


def sha3_256(data):
    '''
    SHA3-256 digest, 32 bytes.
    '''
    return digest('sha3_256', data)


def sha3_384(data):
    '''
    SHA3-384 digest, 48 bytes.
    '''
    return digest('sha3_384', data)


def sha3_512(data):
    '''
    SHA3-512 digest, 64 bytes.
    '''
    return digest('sha3_512', data)
