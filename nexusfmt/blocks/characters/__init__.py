"""The CHARACTERS block: formats, states, matrix, parsing and rendering."""