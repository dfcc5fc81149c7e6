"""
Variables are `let` bindings. There is no mutation; a second `set` shadows the first.
"""
from ..generator import emitter, Order, Generation
from ..graph import Node
from ..names import Category

@emitter('variables_get')
def variables_get(gen:Generation, node:Node):
	return gen.name(node.field('VAR') or '', Category.VARIABLE), Order.ATOMIC

@emitter('variables_set')
def variables_set(gen:Generation, node:Node):
	value = gen.value_to_code(node, 'VALUE', Order.NONE) or '0'
	return 'let %s = %s\n'%(gen.name(node.field('VAR') or '', Category.VARIABLE), value)
