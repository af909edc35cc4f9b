"""
Signature overlay feature.

Maps signature images and free-text annotations placed in viewport pixels
onto PDF pages and writes a new, signed copy of the document.
"""
