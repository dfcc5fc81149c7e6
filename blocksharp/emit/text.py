from ..generator import emitter, Order, Generation, quote
from ..graph import Node

@emitter('text')
def text(gen:Generation, node:Node):
	return quote(node.field('TEXT') or ''), Order.ATOMIC

@emitter('text_join')
def text_join(gen:Generation, node:Node):
	parts = [gen.value_to_code(node, slot, Order.ATOMIC) for slot in node.input_names('ADD')]
	parts = ['string ' + p if p[:1] != '"' else p for p in parts if p]
	if not parts:
		return '""', Order.ATOMIC
	return 'String.concat "" [%s]'%'; '.join(parts), Order.FUNCTION_APPLICATION

@emitter('text_length')
def text_length(gen:Generation, node:Node):
	return 'String.length ' + (gen.value_to_code(node, 'VALUE', Order.ATOMIC) or '""'), Order.FUNCTION_APPLICATION

@emitter('text_isEmpty')
def text_is_empty(gen:Generation, node:Node):
	return 'String.IsNullOrEmpty ' + (gen.value_to_code(node, 'VALUE', Order.ATOMIC) or '""'), Order.FUNCTION_APPLICATION

@emitter('text_print')
def text_print(gen:Generation, node:Node):
	return 'printfn "%%A" %s\n'%(gen.value_to_code(node, 'TEXT', Order.ATOMIC) or '""')
