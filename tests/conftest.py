import pytest

SCENARIO_MAP = (
    "osu file format v14\n"
    "[Difficulty]\n"
    "ApproachRate:9\n"
    "OverallDifficulty:8\n"
    "[TimingPoints]\n"
    "0,500,4,2,1,60,1,0\n"
    "2000,-50,4,2,1,60,0,0\n"
    "[HitObjects]\n"
    "100,100,1000,1,0\n"
    "200,200,2000,2,0,L|300:300,1,100\n"
)

FULL_MAP = """\
osu file format v14

[General]
AudioFilename: audio.mp3
AudioLeadIn: 0
PreviewTime: 41250
Mode: 0

[Editor]
BeatDivisor: 4

[Metadata]
Title:Test Song
TitleUnicode:テストソング
Artist:Test Artist
ArtistUnicode:テストアーティスト
Creator:mapper
Version:Insane
Source:
BeatmapID:123

[Difficulty]
HPDrainRate:6
CircleSize:4
OverallDifficulty:8
ApproachRate:9.3
SliderMultiplier:1.4
SliderTickRate:2

[Events]
//Background and Video events
Video,-120,"intro.mp4"
0,0,"background.jpg",0,0
//Storyboard Layer 0 (Background)
Sprite,Background,Centre,"sb/dot.png",320,240
 F,0,1000,2000,0,1
_M,0,1000,2000,320,240,320,480

[TimingPoints]
0,500,4,2,1,60,1,0
1000,-50,4,2,1,60,0,1
2000,400,3,1,0,80,1,0

[Colours]
Combo1 : 255,128,0

[HitObjects]
64,80,500,5,2,1:2:3:70:clap.wav
100,100,1000,2,0,B|200:200|250:200|250:200|300:150,2,310.5,2|0|8,0:0|1:2|0:3,0:0:0:0:
256,192,1500,12,8,2500,0:0:0:0:
300,300,3000,6,0,P|350:250|400:300,1,150
10,20,3500,2,0,C|60:20|110:40|160:20,1,180
50,50,4000,128,0,4500:0:0:0:0:
"""

@pytest.fixture
def scenario_map() -> str:
    return SCENARIO_MAP

@pytest.fixture
def full_map() -> str:
    return FULL_MAP

@pytest.fixture
def map_dir(tmp_path, full_map, scenario_map):
    mapset = tmp_path / "123 Test Artist - Test Song"
    mapset.mkdir()
    (mapset / "insane.osu").write_text(full_map, encoding="utf-8")
    (mapset / "scenario.osu").write_text(scenario_map, encoding="utf-8")
    (mapset / "audio.mp3").write_bytes(b"")
    return tmp_path
