# battlecity

A tank battle arcade game played on a grid of bricks, bushes, concrete and
water. Defend your base, destroy every enemy tank of the level, and pick up
bonuses along the way. It runs on pygame.

## Installing

```
pip install .
```

For running the test suite:

```
pip install .[test]
pytest
```

## Playing

Start the game with:

```
battlecity
```

It opens full screen by default. Options:

- `--windowed` run in a window instead of full screen
- `--width N`, `--height N` window size in windowed mode (default 1280 x 720)
- `--levels-dir DIR` directory to read level files from

The game reads up to four level files named `1_level.txt` to `4_level.txt`,
from `--levels-dir` or else from the `levels` directory inside the installed
`battlecity` package. A file that is missing or unusable is left out of the
level list.

The main menu shows **Play** and **Quit**. Use the Up and Down arrow keys to
move the selection (it wraps around at the ends) and Enter or Return to
confirm, or click an entry with the mouse; hovering selects it. **Play** leads
to the list of levels; **Back** returns to the start screen; **Quit** closes
the game, as does closing the window.

In a level:

- Arrow keys drive your tank. Holding several arrows keeps the most recently
  pressed one as the driving direction; releasing all of them stops the tank.
- Space fires. Only one of your shells can be in flight at a time.

You start with three lives. Each time you respawn, and at the start, you get
a shield for a few seconds; while it is up, hits do no harm. When you are hit
without a shield you go back to your start cell and lose a life. Losing all
lives, or losing your base to a single shell, ends the game: a game-over
banner rises to the middle of the field and the menu returns.

A new enemy appears every six seconds until the level's enemy count is
reached. Enemies turn and fire at random once a second; some are fast and
fall to one shell, others are slower and take two. Each enemy destroyed
scores 100 points; destroying all of them wins the level and returns to the
menu. The panel on the right shows an icon per remaining enemy and the score.

### Terrain

| Block    | Tanks pass | Shells pass | Destructible |
|----------|------------|-------------|--------------|
| Brick    | no         | no          | yes          |
| Bush     | yes        | yes         | no           |
| Concrete | no         | no          | no           |
| Water    | no         | yes         | no           |

Bushes are drawn above tanks.

### Bonuses

A bonus appears at a random free spot every six seconds, blinks for its last
two seconds and vanishes after seven. Drive into it to pick it up:

- **Grenade** destroys every enemy tank on the field.
- **Shovel** walls the base in concrete for seven seconds; the wall blinks
  before it comes down and the blocks it covered reappear.
- **Helmet** gives your tank a shield, or restarts the one it has.
- **Star** does all three at once.

## Level files

A level is a plain text file. The first line holds the level number and the
number of enemies, separated by a single space. Each following line is one
row of the map, one character per cell:

- `0` brick, `1` bush, `2` concrete, `3` water
- `p` the player's start cell, `b` the base's cell (either case)
- any other character, such as a space, leaves the cell empty

```
1 4
0 0 0 0
 2   3
 p b
```

If `p` or `b` appears on several rows, the last such row counts. Unix and
Windows line endings are both accepted.

Levels can be read in code with `battlecity.level.load_level(path)`, which
raises `LevelError` for a file that does not exist or cannot be read, or
parsed from text with `battlecity.level.parse_level(text)`, which raises
`LevelError` when the first line lacks the two numbers. `Level.is_ok()` tells
whether a level has an id and valid player and base positions.

## What the package does not include

The package contains no level files, images or sounds. Without level files
the level list is empty. Images are looked up under the package directory
(for example `images/tank.png`, `images/static_blocks/brick.png`); where one
is missing the item is drawn as a plain coloured rectangle. Sounds are looked
up in the package's `sounds` directory (`shoot.wav` played on every shot,
`explosion.wav` when an enemy tank is destroyed); where they are missing, or
no audio device is available, the game is silent. The game does not play
background music.