"""Navigator Keyring Meta information.
   Navigator Keyring keeps service passwords encrypted on local disk.
"""
__title__ = 'navigator_keyring'
__description__ = (
   'Navigator Keyring keeps service passwords encrypted '
   'on local disk.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-keyring'
