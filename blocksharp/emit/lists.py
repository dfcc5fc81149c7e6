"""
Lists and options, spelled the F# way: `[a; b]`, `x :: xs`, `Some x`.
"""
from ..generator import emitter, Order, Generation
from ..graph import Node

# Single-argument functions from the List module.
LIST_FUNCTIONS = {
	'lists_length': 'List.length',
	'lists_isEmpty': 'List.isEmpty',
	'lists_sort': 'List.sort',
	'lists_getHead': 'List.head',
	'lists_getTail': 'List.tail',
}

@emitter('lists_create_with')
def lists_create_with(gen:Generation, node:Node):
	elements = [gen.value_to_code(node, slot, Order.SEMI_COLON) for slot in node.input_names('ADD')]
	return '[%s]'%'; '.join(e for e in elements if e), Order.ATOMIC

def _apply(gen:Generation, node:Node):
	return LIST_FUNCTIONS[node.kind] + ' ' + (gen.value_to_code(node, 'VALUE', Order.ATOMIC) or '[]'), Order.FUNCTION_APPLICATION

for kind in LIST_FUNCTIONS:
	emitter(kind)(_apply)

@emitter('lists_cons')
def lists_cons(gen:Generation, node:Node):
	# Right-associative, so only the head is at risk of needing parentheses at the same order.
	head = gen.value_to_code(node, 'FIRST', Order.LIST_OPERATOR) or '()'
	tail = gen.value_to_code(node, 'REST', Order.NONE) or '[]'
	return head + ' :: ' + tail, Order.LIST_OPERATOR

@emitter('lists_append')
def lists_append(gen:Generation, node:Node):
	a = gen.value_to_code(node, 'A', Order.LIST_OPERATOR) or '[]'
	b = gen.value_to_code(node, 'B', Order.LIST_OPERATOR) or '[]'
	return a + ' @ ' + b, Order.LIST_OPERATOR

@emitter('option_none')
def option_none(gen:Generation, node:Node):
	return 'None', Order.ATOMIC

@emitter('option_some')
def option_some(gen:Generation, node:Node):
	value = gen.value_to_code(node, 'VALUE', Order.ATOMIC)
	if not value:
		return 'None', Order.ATOMIC
	return 'Some ' + value, Order.FUNCTION_APPLICATION
