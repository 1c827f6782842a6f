from unfold.components.inline import inline_splices
