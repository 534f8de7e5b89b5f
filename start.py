"""一键启动闭眼报警系统 Web 服务"""

import logging
import os
import sys

# 确保工作目录为脚本所在目录（报警音频等相对路径以此为准）
os.chdir(os.path.dirname(os.path.abspath(__file__)))


def check_dependencies():
    """检查必要依赖是否已安装"""
    missing = []
    for pkg, import_name in [
        ("flask", "flask"),
        ("opencv-python", "cv2"),
        ("mediapipe", "mediapipe"),
        ("numpy", "numpy"),
        ("pygame", "pygame"),
    ]:
        try:
            __import__(import_name)
        except ImportError:
            missing.append(pkg)

    if missing:
        print("=" * 50)
        print("缺少以下依赖，正在自动安装...")
        print(", ".join(missing))
        print("=" * 50)
        import subprocess
        subprocess.check_call([
            sys.executable, "-m", "pip", "install", *missing
        ])
        print("依赖安装完成！\n")


if __name__ == "__main__":
    print("=" * 50)
    print("  闭眼报警系统 - 启动中...")
    print("=" * 50)

    check_dependencies()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("\n系统已启动！")
    print("开始监测: POST http://localhost:5000/api/start")
    print("视频画面: http://localhost:5000/video_feed")
    print("按 Ctrl+C 停止服务\n")

    from web_app import app
    app.run(host="0.0.0.0", port=5000, debug=False, threaded=True)
