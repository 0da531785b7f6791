'''
Keccak-f[1600] permutation and sponge construction under FIPS 202.
'''

import enum
import logging

import numpy as np

LOGGER = logging.getLogger(__name__)

LANE_WIDTH = 64
STATE_LANES = 25
STATE_BYTES = 200
NUM_ROUNDS = 24

# Little-endian lanes, so the uint8 view of a state is its byte serialization.
LANE_DTYPE = np.dtype('<u8')

SHA3_DELIMITER = 0x06
SHAKE_DELIMITER = 0x1F
RAWSHAKE_DELIMITER = 0x07
PAD_LAST_BYTE = 0x80

ROUND_CONSTANTS = np.array([
    0x0000000000000001, 0x0000000000008082, 0x800000000000808A,
    0x8000000080008000, 0x000000000000808B, 0x0000000080000001,
    0x8000000080008081, 0x8000000000008009, 0x000000000000008A,
    0x0000000000000088, 0x0000000080008009, 0x000000008000000A,
    0x000000008000808B, 0x800000000000008B, 0x8000000000008089,
    0x8000000000008003, 0x8000000000008002, 0x8000000000000080,
    0x000000000000800A, 0x800000008000000A, 0x8000000080008081,
    0x8000000000008080, 0x0000000080000001, 0x8000000080008008,
], dtype=LANE_DTYPE)
ROUND_CONSTANTS.flags.writeable = False

# Rotation offsets of step mapping rho, indexed [x][y].
RHO_OFFSETS = (
    (0, 36, 3, 41, 18),
    (1, 44, 10, 45, 2),
    (62, 6, 43, 15, 61),
    (28, 55, 25, 21, 56),
    (27, 20, 39, 8, 14),
)

LFSR_SEED = 0x01
LFSR_FEEDBACK = 0x71  # x^8 + x^6 + x^5 + x^4 + 1
LFSR_BITS_PER_ROUND = 7


class RoundConstantMode(enum.Enum):
    '''
    Source of the round constants used by step mapping iota.
    '''
    TABLE = 'table'
    LFSR = 'lfsr'


class SpongeFinalizedError(RuntimeError):
    '''
    Raised when a sponge is used after it has been finalized.
    '''


def _lfsr_step(register):
    carry = register & 0x80
    register = (register << 1) & 0xFF
    if carry:
        register ^= LFSR_FEEDBACK
    return register


def lfsr_round_constant(round_index):
    '''
    Round constant of round round_index computed by the rc(t) LFSR.

    The register restarts from its seed on every call, so the cost grows
    with the round index.
    '''
    _check_round_index(round_index)
    register = LFSR_SEED
    for _ in range(LFSR_BITS_PER_ROUND * round_index):
        register = _lfsr_step(register)
    constant = 0
    for j in range(LFSR_BITS_PER_ROUND):
        if register & 1:
            constant |= 1 << (2**j - 1)
        register = _lfsr_step(register)
    return constant


def constant_for(round_index, mode=RoundConstantMode.TABLE):
    '''
    Round constant of round round_index, from the table or the LFSR.
    '''
    if mode is RoundConstantMode.TABLE:
        _check_round_index(round_index)
        return int(ROUND_CONSTANTS[round_index])
    if mode is RoundConstantMode.LFSR:
        return lfsr_round_constant(round_index)
    raise TypeError('Unknown round constant mode: {!r}'.format(mode))


def _check_round_index(round_index):
    if not 0 <= round_index < NUM_ROUNDS:
        raise ValueError('Round index must be in [0, {}), got {}'.format(
            NUM_ROUNDS, round_index))


def rotl(lanes, shift):
    '''
    Rotate 64-bit lanes left by shift bits.
    '''
    shift %= LANE_WIDTH
    if shift == 0:
        return lanes
    return (lanes << np.uint64(shift)) | (lanes >> np.uint64(LANE_WIDTH - shift))


def new_state():
    '''
    All-zero Keccak-f[1600] state of 25 lanes.
    '''
    return np.zeros(STATE_LANES, dtype=LANE_DTYPE)


def check_state(state):
    '''
    Validate that state is a flat array of 25 unsigned 64-bit lanes.
    '''
    if not isinstance(state, np.ndarray):
        raise ValueError('State must be a numpy array, got {}'.format(
            type(state).__name__))
    if state.shape != (STATE_LANES,) or state.dtype.kind != 'u' \
            or state.dtype.itemsize != 8:
        raise ValueError('State must hold {} uint64 lanes, got {} {}'.format(
            STATE_LANES, state.shape, state.dtype))


class KeccakF1600:
    '''
    Keccak-f[1600] permutation. Every step mapping updates the 25-lane
    state in place, lane (x, y) living at index x + 5 * y.
    '''
    def __init__(self, mode=RoundConstantMode.TABLE):
        if not isinstance(mode, RoundConstantMode):
            raise TypeError('Unknown round constant mode: {!r}'.format(mode))
        self.mode = mode

    def theta(self, state):
        '''
        Step mapping theta.
        '''
        C = np.bitwise_xor.reduce(state.reshape(5, 5), axis=0)
        D = np.roll(C, 1) ^ rotl(np.roll(C, -1), 1)
        state ^= np.tile(D, 5)

    def rho_pi(self, state):
        '''
        Step mappings rho and pi, walking the 24-cycle of lanes from (1, 0).
        '''
        (x, y) = (1, 0)
        current = state[x + 5 * y]
        for _ in range(24):
            (next_x, next_y) = (y, (2 * x + 3 * y) % 5)
            displaced = state[next_x + 5 * next_y]
            state[next_x + 5 * next_y] = rotl(current, RHO_OFFSETS[x][y])
            current = displaced
            (x, y) = (next_x, next_y)

    def chi(self, state):
        '''
        Step mapping chi.
        '''
        rows = state.reshape(5, 5).copy()
        state[:] = (rows ^ (~np.roll(rows, -1, axis=1)
                            & np.roll(rows, -2, axis=1))).reshape(-1)

    def iota(self, state, round_index):
        '''
        Step mapping iota.
        '''
        state[0] ^= np.uint64(constant_for(round_index, self.mode))

    def round(self, state, round_index):
        '''
        Round function Rnd.
        '''
        self.theta(state)
        self.rho_pi(state)
        self.chi(state)
        self.iota(state, round_index)

    def permute(self, state):
        '''
        Apply all 24 rounds to state and return it.
        '''
        check_state(state)
        for round_index in range(NUM_ROUNDS):
            self.round(state, round_index)
        return state


def keccak_f1600(state, mode=RoundConstantMode.TABLE):
    '''
    Keccak-f[1600] applied in place to a caller-owned 25-lane state.
    '''
    return KeccakF1600(mode).permute(state)


class KeccakSponge:
    '''
    Keccak sponge over Keccak-f[1600] with a byte-granular rate.

    Input is XORed into the first rate bytes of the state, byte i landing
    in lane i // 8 at bit offset 8 * (i % 8). finalize() pads with the
    delimiter and pad10*1, then squeezes; the sponge cannot be used again.
    '''
    def __init__(self, rate, delimiter, mode=RoundConstantMode.TABLE):
        if not 0 < rate < STATE_BYTES:
            raise ValueError('Rate must be in (0, {}) bytes, got {}'.format(
                STATE_BYTES, rate))
        if not 0 <= delimiter <= 0xFF:
            raise ValueError('Delimiter must be a single byte, got {}'.format(
                delimiter))
        self.rate = rate
        self.capacity = STATE_BYTES - rate
        self.delimiter = delimiter
        self.offset = 0
        self.finalized = False
        self.permutation = KeccakF1600(mode)
        self.state = new_state()
        self._bytes = self.state.view(np.uint8)
        LOGGER.debug('Sponge rate=%d capacity=%d delimiter=0x%02x mode=%s',
                     self.rate, self.capacity, self.delimiter, mode.value)

    def _check_absorbing(self, operation):
        if self.finalized:
            raise SpongeFinalizedError(
                'Cannot {} a sponge that has been finalized'.format(operation))

    def absorb(self, data):
        '''
        XOR data into the rate, permuting each time the rate fills up.
        '''
        self._check_absorbing('absorb')
        view = memoryview(data).cast('B')
        if len(view) == 0:
            return self
        chunk = np.frombuffer(view, dtype=np.uint8)
        position = 0
        while position < len(chunk):
            take = min(self.rate - self.offset, len(chunk) - position)
            self._bytes[self.offset:self.offset + take] ^= \
                chunk[position:position + take]
            self.offset += take
            position += take
            if self.offset == self.rate:
                self.permutation.permute(self.state)
                self.offset = 0
        return self

    def copy(self):
        '''
        Independent sponge with the same absorbed input.
        '''
        self._check_absorbing('copy')
        clone = KeccakSponge(self.rate, self.delimiter, self.permutation.mode)
        clone.state[:] = self.state
        clone.offset = self.offset
        return clone

    def finalize(self, output_length):
        '''
        Pad, then squeeze exactly output_length bytes. Consumes the sponge.
        '''
        self._check_absorbing('finalize')
        if output_length < 0:
            raise ValueError('Output length must be non-negative, got {}'.format(
                output_length))
        self.finalized = True

        self._bytes[self.offset] ^= self.delimiter
        self._bytes[self.rate - 1] ^= PAD_LAST_BYTE
        self.permutation.permute(self.state)

        output = bytearray()
        blocks = 0
        while len(output) < output_length:
            take = min(self.rate, output_length - len(output))
            output += self._bytes[:take].tobytes()
            blocks += 1
            if len(output) < output_length:
                self.permutation.permute(self.state)
        LOGGER.debug('Finalized after %d trailing bytes: %d bytes in %d blocks',
                     self.offset, output_length, blocks)
        return bytes(output)
