"""Command layer of dirshell: tokenizer, dispatch table, colors and REPL."""
