from .context_assembler import ContextAssembler, assemble_context, MAX_ANCESTOR_DEPTH

__all__ = ['ContextAssembler', 'assemble_context', 'MAX_ANCESTOR_DEPTH']
