"""
# pngstruct, a file format ORM for PNG chunks.

A file format is described declaratively as a Chunk subclass whose class
attributes are fields; two basic main operations are defined for the format
and its sub components:

 1. unpack(): the more straightforward, i.e., reading the binary data
    and build a high-level representation of that.
    The chunk itself knows how many bytes needs to read
    to finalize the representation

 2. pack(): encode the high-level representation into binary data.

to these we add one more

 3. relayout(): trigger a recursive layout "negotiation" between a component
    and its subcomponents so to have offset and size set in the correct way.
    If not indicated explicitly a packing also implies a relayouting.

The PNG format lives in pngstruct.images.png: there a file is a signature
followed by a list of CRC-protected chunks that can be added, looked up and
removed without touching the rest of the image.
"""
