from rich.pretty import pprint

from argshape import *

start = Command(
    "start",
    "start the scene",
    [
        flag("quiet", short=True, help="start without printing progress"),
        option("frames", "?u32", help="number of frames to render"),
    ],
)

stop = Command(
    "stop",
    "stop the scene",
    [flag("force", help="stop without flushing the output")],
)

image = Command(
    "image",
    "render a scene into an image",
    [
        option("width", "u32", short=True, default="640", help="the width of the image"),
        option("height", "u32", default="480", help="the height of the image"),
        option("scene", "?string", short=True, help="scene file to render"),
        positional("output", "?string", help="where to write the image"),
    ],
    [start, stop],
    shell=True,
    colorful=True,
    fancy=True,
)


if __name__ == '__main__':
    pprint(invoke(image))
