"""API 行为验证脚本（针对正在运行的服务）"""
import sys
from typing import List, Optional

import httpx


class Colors:
    """终端颜色"""
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    RESET = "\033[0m"


def print_pass(message: str):
    print(f"{Colors.GREEN}✅ PASS{Colors.RESET}: {message}")


def print_fail(message: str):
    print(f"{Colors.RED}❌ FAIL{Colors.RESET}: {message}")


def print_info(message: str):
    print(f"{Colors.YELLOW}ℹ️  INFO{Colors.RESET}: {message}")


def check_create(client: httpx.Client) -> Optional[List[int]]:
    """
    创建三条 idea，校验 order 依次递增、标签被转为小写

    Returns:
        新建 idea 的 id（创建顺序），失败返回 None
    """
    print("\n" + "=" * 60)
    print("测试 1: POST /api/ideas")
    print("=" * 60)

    created = []
    for i, platform in enumerate(["twitter", "reddit", "linkedin"]):
        response = client.post(
            "/api/ideas",
            json={"title": f"verify-{i}", "platform": platform, "tags": ["Verify", " VERIFY "]},
        )
        response.raise_for_status()
        created.append(response.json())

    orders = [idea["order"] for idea in created]
    if orders != sorted(orders) or len(set(orders)) != len(orders):
        print_fail(f"order 应严格递增，实际为 {orders}")
        return None
    print_pass(f"order 递增: {orders}")

    tag_names = [t["name"] for t in created[0]["tags"]]
    if tag_names != ["verify"]:
        print_fail(f"标签应归一化为 ['verify']，实际为 {tag_names}")
        return None
    print_pass("标签已归一化并去重")

    if "createdAt" not in created[0]:
        print_fail("响应缺少 'createdAt' 字段")
        return None
    print_pass("响应包含 'createdAt' 字段")

    return [idea["id"] for idea in created]


def check_reorder(client: httpx.Client, ids: List[int]) -> bool:
    """把最早创建的 idea 移到最上方，校验列表顺序"""
    print("\n" + "=" * 60)
    print("测试 2: PUT /api/ideas/reorder")
    print("=" * 60)

    desired = [ids[0], ids[2], ids[1]]
    updates = [{"id": idea_id, "order": 1000 + len(desired) - i} for i, idea_id in enumerate(desired)]
    response = client.put("/api/ideas/reorder", json={"updates": updates})
    response.raise_for_status()
    print_pass(f"reorder 响应: {response.json()}")

    listed = [idea["id"] for idea in client.get("/api/ideas").json() if idea["id"] in ids]
    if listed != desired:
        print_fail(f"列表顺序应为 {desired}，实际为 {listed}")
        return False
    print_pass(f"列表顺序正确: {listed}")
    return True


def check_unknown_reorder(client: httpx.Client):
    """未知 id 的 reorder 应返回 500 + message"""
    response = client.put("/api/ideas/reorder", json={"updates": [{"id": 987654321, "order": 1}]})
    if response.status_code != 500 or "message" not in response.json():
        print_fail(f"应返回 500 + message，实际为 {response.status_code} {response.text}")
        return
    print_pass(f"未知 id 被拒绝: {response.json()['message']}")


def cleanup(client: httpx.Client, ids: List[int]):
    for idea_id in ids:
        client.delete(f"/api/ideas/{idea_id}").raise_for_status()
    print_info(f"已删除测试数据: {ids}")


def main():
    """主函数"""
    base_url = "http://127.0.0.1:8000"

    # 如果提供了命令行参数，使用它作为 base_url
    if len(sys.argv) > 1:
        base_url = sys.argv[1]

    print(f"\n🚀 开始验证 API 行为")
    print(f"📍 目标 URL: {base_url}")

    try:
        with httpx.Client(base_url=base_url, timeout=30.0) as client:
            ids = check_create(client)
            if ids:
                check_reorder(client, ids)
                check_unknown_reorder(client)
                cleanup(client, ids)
            else:
                print_fail("跳过 reorder 测试（创建失败）")
    except httpx.HTTPStatusError as e:
        print_fail(f"HTTP 错误: {e.response.status_code} - {e.response.text}")
    except httpx.RequestError as e:
        print_fail(f"请求错误: {str(e)}")

    print("\n" + "=" * 60)
    print("✅ 验证完成")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
