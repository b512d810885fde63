import random
import string

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 5


def generate_room_code(is_taken, rng=random, length=CODE_LENGTH):
    """Generate a room code that ``is_taken`` reports as unused."""
    while True:
        code = ''.join(rng.choices(CODE_ALPHABET, k=length))
        if not is_taken(code):
            return code
