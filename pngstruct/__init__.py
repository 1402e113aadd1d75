"""
# pngstruct: PNG container ORM.

A file format is described declaratively: a Struct is a class whose attributes
are fields, each field knowing its size, its binary representation and how to
read itself from a stream.

Two basic main operations are defined for the file format and its sub components:

 1. unpack(): reading the binary data and build a high-level representation of that.
    The offset is the actual offset of the stream and each field knows how many
    bytes needs to read to finalize the representation

 2. pack(): encode the high-level representation into binary data.

The PNG container (pngstruct.png) is a signature followed by chunks: each
chunk has a length, a type code, a payload and a CRC-32 of type and payload.
Parsing validates everything and a parsed instance is always consistent:

    >>> from pngstruct.png import Container, Chunk
    >>> png = Container.parse(data)
    >>> png.append_chunk(Chunk.new('ruSt', b'hidden'))
    >>> png.chunk_by_type('ruSt').data_as_text()
    'hidden'
    >>> data = png.as_bytes()

"""
