"""
The survey wizard core: which questions a section shows, what a submitted
page means (back / next / re-render), and moving the section cursor.
"""
