#!/usr/bin/env python3
'''
Hide messages into PNG files.

 $ pngme.py encode image.png ruSt 'This is where your secret message will be!'
 $ pngme.py decode image.png ruSt
 $ pngme.py remove image.png ruSt
 $ pngme.py print image.png
'''
import logging
import sys
import os

from pngstruct.images.png import commands


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


if __name__ == '__main__':
    sys.exit(commands.main(sys.argv[0], sys.argv[1:]))
