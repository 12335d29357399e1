"""CHIP-8 stack operations.

Pushing onto a full stack and popping an empty one leave the stack as it is.
Callers check ``is_full``/``is_empty`` to turn the instruction into a no-op.
"""

import jax.numpy as jnp
from chipjax.constants import ADDRESS_MASK, STACK_SIZE
from chipjax.state import StackState


def is_full(stack: StackState) -> jnp.ndarray:
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState) -> jnp.ndarray:
    return stack.pointer == 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack, saturating at STACK_SIZE entries."""
    full = is_full(stack)
    index = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = jnp.where(full, stack.data, stack.data.at[index].set(masked_address))
    new_pointer = jnp.where(full, stack.pointer, stack.pointer + 1)
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.uint8))


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack. An empty stack pops address 0 and stays empty."""
    empty = is_empty(stack)
    new_pointer = jnp.where(empty, stack.pointer, stack.pointer - 1)
    popped_address = jnp.where(empty, jnp.zeros((), dtype=jnp.uint16), stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(jnp.where(empty, stack.data[new_pointer], 0))
    return stack.replace(data=new_data, pointer=jnp.astype(new_pointer, jnp.uint8)), popped_address
