import PyInstaller.__main__

PyInstaller.__main__.run([
    'run.py',
    '--name=LED-Animator',
    '--windowed',
    '--onefile',
    '--icon=NONE',
    '--add-data=led_animator:led_animator',
    '--collect-all=PIL',
    '--collect-all=PyQt6',
    '--noconfirm',
])
