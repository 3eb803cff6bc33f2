# Nonogram Grid Style Definitions

# Cell States
COLOR_HIDDEN = (180, 180, 180)
COLOR_FILLED = (20, 20, 20)      # Revealed, part of the picture
COLOR_EMPTY = (235, 235, 235)    # Revealed, not part of the picture
COLOR_CROSS = (120, 120, 120)

# Lines and Outlines
COLOR_GRID_LINES = (70, 70, 70)
COLOR_WRONG = (220, 40, 40)              # Red outline for wrong guesses
COLOR_CASCADE_HIGHLIGHT = (255, 255, 0)  # Yellow outline for cells revealed by the last move

# Text
COLOR_TEXT_CLUE = (230, 230, 230)
COLOR_TEXT_STATUS = (220, 220, 220)

# Application
COLOR_BG = (30, 30, 30)
