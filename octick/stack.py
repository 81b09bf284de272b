"""CHIP-8 stack operations."""

from octick.constants import WORD_MASK, STACK_SIZE
from octick.errors import CallStackOverflow, EmptyStackReturn
from octick.state import StackState


def push(stack: StackState, address: int) -> StackState:
    """Push return address onto stack."""
    if stack.depth >= STACK_SIZE:
        raise CallStackOverflow(f"Call stack overflow: {STACK_SIZE} frames in use")
    new_data = stack.data.at[stack.depth].set(int(address) & WORD_MASK)
    return stack.replace(data=new_data, pointer=stack.depth + 1)


def pop(stack: StackState) -> tuple[StackState, int]:
    """Pop return address from stack."""
    if stack.depth == 0:
        raise EmptyStackReturn("Return with empty call stack")
    new_pointer = stack.depth - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
